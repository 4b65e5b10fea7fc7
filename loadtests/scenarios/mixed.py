"""Mixed storefront workload scenario.

Combines staff and shopper journeys with weights that model realistic
traffic. This is the recommended scenario for a load baseline.
"""

from locust import HttpUser, between

from loadtests.scenarios.catalogue import CatalogueBuilder, RepricingJourney
from loadtests.scenarios.checkout import AbandonedCartJourney, CashOnDeliveryJourney, OnlinePaymentJourney


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Catalogue (20%):
    - Catalogue building: staff adding stock
    - Repricing: occasional

    Shopping (80%):
    - Abandoned carts: the most common shopper behavior
    - Online payment: the main conversion path
    - Cash on delivery: the other conversion path, followed through to delivery

    Every checkout touches products, the coupon, the order number sequence and
    the order in one unit of work, so this is the scenario that shows
    contention on the order number sequence.
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        CatalogueBuilder: 3,
        RepricingJourney: 1,
        AbandonedCartJourney: 6,
        OnlinePaymentJourney: 6,
        CashOnDeliveryJourney: 4,
    }
