from typing import Any, Dict, List

# Seed catalog served by the storefront
PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "name": "Crochet Tote Bag",
        "description": "A beautiful, handcrafted crochet tote bag. Perfect for everyday use or as a stylish accessory.",
        "images": ["/products/item1.0.JPG", "/products/item1.1.JPG"],
        "price": 45.00,
        "category": "Bags",
        "production_days": 10,
        "colors": ["Red", "Blue", "Green"],
        "sizes": ["Small", "Medium", "Large"],
    },
    {
        "id": "2",
        "name": "Crochet Plush Toy",
        "description": "Adorable, custom-made crochet plush toy. A perfect gift for loved ones or a cute decor piece.",
        "images": ["/products/item2.0.JPG", "/products/item2.1.JPG"],
        "price": 30.00,
        "category": "Toys",
        "production_days": 20,
        "colors": ["Yellow", "Pink", "White"],
        "sizes": ["Small", "Large"],
    },
]

# Disclosure the buyer must accept before paying
PRIVACY_POLICY: Dict[str, List[str]] = {
    "Data We Collect": [
        "Name: To personalize your order and delivery",
        "Email: For delivery notifications and support",
        "Address: For shipping your order",
        "Order Items: Products you purchase",
    ],
    "How We Use Your Data": [
        "Order Fulfillment: Ship your order to your address",
        "Communication: Send order confirmations and updates",
        "Support: Help with any issues related to your order",
    ],
    "Data Sharing": [
        "Shipping Partners: Your address is shared only for delivery",
        "Third Parties: We do not sell or share your data with third parties",
    ],
    "Your Rights": [
        "Access: View and download your data at any time",
        "Delete: Request deletion of your data and orders",
        "Contact: Reach us at privacy@nanahstore.com",
    ],
}
