"""Catalogue load test scenarios.

Stateful SequentialTaskSet journeys for store staff building the catalogue:
a category tree with products under it, and repricing and restocking an
existing product. Steps execute in order; each depends on the previous one.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import attribute_data, category_data, product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CatalogueState


class CatalogueBuilder(SequentialTaskSet):
    """Create Category -> Subcategory -> Product -> Attributes -> Browse -> List.

    Generates events: CategoryCreated (x2), ProductCreated,
    ProductAttributeAdded (x2).
    """

    def on_start(self):
        self.state = CatalogueState()

    @task
    def create_root_category(self):
        with self.client.post(
            "/categories",
            json=category_data(),
            catch_response=True,
            name="POST /categories",
        ) as resp:
            if resp.status_code == 201:
                self.state.category_ids.append(resp.json()["category_id"])
            else:
                resp.failure(f"Create category failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_subcategory(self):
        with self.client.post(
            "/categories",
            json=category_data(parent_id=self.state.category_ids[0]),
            catch_response=True,
            name="POST /categories (child)",
        ) as resp:
            if resp.status_code == 201:
                self.state.category_ids.append(resp.json()["category_id"])
            else:
                resp.failure(f"Create subcategory failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_product(self):
        with self.client.post(
            "/products",
            json=product_data(category_id=self.state.category_ids[-1]),
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_ids.append(resp.json()["product_id"])
            else:
                resp.failure(f"Create product failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task(2)
    def add_attribute(self):
        product_id = self.state.product_ids[-1]
        with self.client.post(
            f"/products/{product_id}/attributes",
            json=attribute_data(),
            catch_response=True,
            name="POST /products/{id}/attributes",
        ) as resp:
            if resp.status_code == 201:
                self.state.attribute_ids[product_id] = resp.json()["attribute_id"]
            else:
                resp.failure(f"Add attribute failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def view_product(self):
        with self.client.get(
            f"/products/{self.state.product_ids[-1]}",
            catch_response=True,
            name="GET /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get product failed: {resp.status_code}")

    @task
    def view_category(self):
        with self.client.get(
            f"/categories/{self.state.category_ids[-1]}",
            catch_response=True,
            name="GET /categories/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get category failed: {resp.status_code}")

    @task
    def browse_listing(self):
        with self.client.get(
            "/products",
            params={"category_id": self.state.category_ids[-1], "sort": random.choice(["newest", "price_low", "name"])},
            catch_response=True,
            name="GET /products",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Browse products failed: {resp.status_code}")

    @task
    def done(self):
        self.interrupt()


class RepricingJourney(SequentialTaskSet):
    """Create Product -> Reprice -> Restock -> Feature.

    Generates events: ProductCreated, ProductPriceChanged, StockLevelChanged,
    ProductDetailsUpdated.
    """

    def on_start(self):
        self.state = CatalogueState()

    @task
    def create_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_ids.append(resp.json()["product_id"])
            else:
                resp.failure(f"Create product failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def reprice(self):
        price = round(random.uniform(100, 2000), 2)
        with self.client.put(
            f"/products/{self.state.product_ids[-1]}/pricing",
            json={"price": price, "compare_price": round(price * 1.2, 2)},
            catch_response=True,
            name="PUT /products/{id}/pricing",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Reprice failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def restock(self):
        with self.client.put(
            f"/products/{self.state.product_ids[-1]}/stock",
            json={"quantity": random.randint(100, 1000)},
            catch_response=True,
            name="PUT /products/{id}/stock",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Restock failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def feature(self):
        with self.client.put(
            f"/products/{self.state.product_ids[-1]}",
            json={"featured": True},
            catch_response=True,
            name="PUT /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Feature product failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CatalogueUser(HttpUser):
    """Locust user simulating store staff maintaining the catalogue.

    Weighted distribution:
    - 60% Catalogue Builder
    - 40% Repricing
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        CatalogueBuilder: 3,
        RepricingJourney: 2,
    }
