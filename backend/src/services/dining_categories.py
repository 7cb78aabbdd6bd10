"""Foursquare category ids used to restrict venue searches to dining places.

Vendor-specific static data; update here without touching the scoring code.
"""

from __future__ import annotations

from typing import Tuple


DINING_CATEGORY_IDS: Tuple[str, ...] = (
    "4d4b7105d754a06374d81259",  # Restaurants
    "63be6904847c3692a84b9bb5",  # Dining and Drinking
    "4bf58dd8d48988d116941735",  # Bars
    "4bf58dd8d48988d11b941735",  # Pubs
    "4bf58dd8d48988d16a941735",  # Bakeries
    "63be6904847c3692a84b9bb6",  # Cafes, Coffee, and Tea Houses
    "4bf58dd8d48988d16e941735",  # Fast Food Restaurants
    "4bf58dd8d48988d147941735",  # Diners
    "4bf58dd8d48988d1cb941735",  # Food Trucks
    "4bf58dd8d48988d120951735",  # Food Courts
    "52e81612bcbc57f1066b7a00",  # Comfort Food Restaurants
    "4bf58dd8d48988d1d3941735",  # Vegan and Vegetarian Restaurants
    "4bf58dd8d48988d14f941735",  # Southern Food Restaurants
    "4bf58dd8d48988d1cc941735",  # Steakhouses
    "4bf58dd8d48988d1ca941735",  # Pizzerias
    "4bf58dd8d48988d153941735",  # Burrito Restaurants
    "4bf58dd8d48988d1c0941735",  # Mediterranean Restaurants
    "4bf58dd8d48988d1c1941735",  # Mexican Restaurants
    "4bf58dd8d48988d1ce941735",  # Seafood Restaurants
    "4bf58dd8d48988d10e941735",  # Greek Restaurants
    "4bf58dd8d48988d111941735",  # Italian Restaurants
    "4bf58dd8d48988d110941735",  # Indian Restaurants
    "4bf58dd8d48988d1d2941735",  # Sushi Restaurants
    "4bf58dd8d48988d1d1941735",  # Noodle Restaurants
    "4bf58dd8d48988d149941735",  # Thai Restaurants
    "4bf58dd8d48988d14a941735",  # Vietnamese Restaurants
    "4bf58dd8d48988d10c941735",  # French Restaurants
    "4bf58dd8d48988d150941735",  # Spanish Restaurants
    "4bf58dd8d48988d1db931735",  # Tapas Restaurants
    "4bf58dd8d48988d151941735",  # Taco Restaurants
    "4bf58dd8d48988d1c5941735",  # Sandwich Spots
    "4bf58dd8d48988d1bd941735",  # Salad Restaurants
    "4bf58dd8d48988d148941735",  # Donut Shops
    "4bf58dd8d48988d1c9941735",  # Ice Cream Parlors
    "4bf58dd8d48988d1d0941735",  # Dessert Shops
    "4bf58dd8d48988d1bc941735",  # Cupcake Shops
    "512e7cae91d4cbb4e5efe0af",  # Frozen Yogurt Shops
    "52e81612bcbc57f1066b7a0c",  # Bubble Tea Shops
    "4bf58dd8d48988d1e0931735",  # Coffee Shops
    "4bf58dd8d48988d16d941735",  # Cafés
    "4bf58dd8d48988d1dc931735",  # Tea Rooms
    "52e81612bcbc57f1066b79f2",  # Creperies
    "62d5af45da6648532de303ee",  # Waffle Shops
    "4bf58dd8d48988d1de941735",  # Vineyards
    "4bf58dd8d48988d14b941735",  # Wineries
    "4e0e22f5a56208c4ea9a85a0",  # Distilleries
    "50327c8591d4c4b30a586d5d",  # Breweries
    "5e189fd6eee47d000759bbfd",  # Cideries
    "5e189d71eee47d000759b7e2",  # Meaderies
    "4bf58dd8d48988d179941735",  # Bagel Shops
    "4bf58dd8d48988d143941735",  # Breakfast Spots
    "4bf58dd8d48988d1be941735",  # Latin American Restaurants
    "4bf58dd8d48988d144941735",  # Caribbean Restaurants
    "4bf58dd8d48988d1bf941735",  # Mac and Cheese Joints
    "4bf58dd8d48988d17a941735",  # Cajun and Creole Restaurants
    "4bf58dd8d48988d1df931735",  # BBQ Joints
    "4bf58dd8d48988d16b941735",  # Brazilian Restaurants
    "4bf58dd8d48988d152941735",  # Arepa Restaurants
    "4bf58dd8d48988d107941735",  # Argentinian Restaurants
    "4bf58dd8d48988d10f941735",  # Indian Restaurants
    "4bf58dd8d48988d1f5941735",  # Dim Sum Restaurants
    "4bf58dd8d48988d1c3941735",  # Moroccan Restaurants
    "4bf58dd8d48988d1c7941735",  # Snack Places
    "4bf58dd8d48988d155941735",  # Gastropubs
)


def category_param(ids: Tuple[str, ...] = DINING_CATEGORY_IDS) -> str:
    return ",".join(ids)
