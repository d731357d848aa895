"""
Fallback Catalog - Catalog Extraction System
=============================================
Fixed, hand-authored product records substituted when live extraction
fails or yields too few products. No extraction is involved.
"""

from datetime import datetime
from typing import List, Optional

from models import ProductRecord

IMAGE_BASE = "https://storage.googleapis.com/workspace-0f70711f-8b4e-4d94-86f1-2a93ccde5887/image/"

# name, description, colors, image ids, price, category, brand
FALLBACK_PRODUCTS = [
    (
        "Samsung Galaxy A54 5G Smartphone",
        "6.4-inch Super AMOLED display with FHD+ resolution, Exynos 1380 processor, 50MP main camera "
        "with OIS, 32MP front camera, 5000mAh battery with 25W fast charging, Android 13 with One UI 5.1",
        ["Awesome Blue", "Awesome Violet", "Awesome White", "Awesome Graphite"],
        ["67f984cd-94c9-413e-a319-fd1a283c904b", "f51d3280-645b-4342-94f8-7b9827bc8a85"],
        "৳ 42,999", "Mobile Phones", "Samsung",
    ),
    (
        "Apple iPhone 14",
        "6.1-inch Super Retina XDR display, A15 Bionic chip with 5-core GPU, dual-camera system with "
        "12MP Main and Ultra Wide cameras, Cinematic mode, 128GB storage, iOS 16",
        ["Blue", "Purple", "Midnight", "Starlight", "Product Red"],
        ["063dea86-a049-4428-82b0-9c4f93acb7cb", "65a65b03-52dd-45f7-a656-cfeb3321dab4"],
        "৳ 89,999", "Mobile Phones", "Apple",
    ),
    (
        "Xiaomi Redmi Note 12 Pro",
        "6.67-inch AMOLED display with 120Hz refresh rate, MediaTek Dimensity 1080 processor, 50MP "
        "triple camera system, 16MP front camera, 5000mAh battery with 67W turbo charging",
        ["Graphite Gray", "Sky Blue", "Polar White"],
        ["6dae031c-c4e6-4a5d-a6ef-90927a7d9eb2", "7c170d26-9122-4f12-aad7-39899ecc889e"],
        "৳ 28,999", "Mobile Phones", "Xiaomi",
    ),
    (
        "Dell Inspiron 15 3000 Laptop",
        "15.6-inch HD anti-glare display, Intel Core i3-1115G4 processor, 4GB DDR4 RAM, 1TB HDD, "
        "Intel UHD Graphics, Windows 11 Home, Wi-Fi 6",
        ["Black", "Silver"],
        ["7badbcef-af36-4970-af15-271a784007ab", "483831b4-f5a8-4844-8189-56e531ade305"],
        "৳ 45,000", "Laptops", "Dell",
    ),
    (
        "HP Pavilion Gaming Laptop",
        "15.6-inch FHD IPS display, Intel Core i5-11400H processor, NVIDIA GeForce GTX 1650 graphics, "
        "8GB DDR4 RAM, 512GB SSD, Windows 11, backlit keyboard",
        ["Shadow Black", "Performance Blue"],
        ["c849f074-ccfe-4010-8c10-3f38d1c47b37", "a130e596-2fc6-4be7-b8e7-8ed67b11712e"],
        "৳ 68,500", "Laptops", "HP",
    ),
    (
        "LG 43-inch 4K Smart LED TV",
        "43LM5650PTA Ultra HD 4K Smart TV with webOS, HDR10 support, built-in WiFi, Magic Remote, "
        "ThinQ AI, 4K Upscaler",
        ["Black"],
        ["4c6d2b64-bf97-4ed3-bfda-8df92521659c", "222985b0-e963-40df-a099-5065177cd3a6"],
        "৳ 38,500", "Television", "LG",
    ),
    (
        "Sony 55-inch BRAVIA XR OLED TV",
        "55A80J OLED 4K Ultra HD Smart Google TV with Cognitive Processor XR, XR OLED Contrast Pro, "
        "Acoustic Surface Audio+",
        ["Black"],
        ["1cbcb79f-3b91-4078-93a8-832c315c8863", "020c4ed5-b720-41bd-93be-4393f3047596"],
        "৳ 185,000", "Television", "Sony",
    ),
    (
        "Sony WH-CH720N Wireless Headphones",
        "Active Noise Canceling wireless headphones, 35-hour battery life, Quick Charge, multipoint "
        "Bluetooth 5.2 connection, built-in microphone",
        ["Black", "White", "Blue"],
        ["0b0efbaf-4be2-4968-b0c8-9fbdc259f835", "98a3e52f-5bc4-4b31-a4b7-1783e8801376"],
        "৳ 12,500", "Audio Accessories", "Sony",
    ),
    (
        "JBL Flip 6 Portable Bluetooth Speaker",
        "JBL Original Pro Sound, IP67 waterproof and dustproof, 12 hours of playtime, JBL PartyBoost",
        ["Black", "Blue", "Red", "Teal", "Gray", "Pink"],
        ["7755d5a9-f871-4216-a078-8a7d7c8abf60", "8207653a-aa9a-40f5-9dbd-6ac9f479e61f"],
        "৳ 8,999", "Audio Accessories", "JBL",
    ),
    (
        "Canon EOS 1500D DSLR Camera",
        "24.1MP APS-C CMOS sensor, DIGIC 4+ processor, Full HD video recording, 9-point autofocus, "
        "built-in flash, EF-S 18-55mm lens included",
        ["Black"],
        ["82179783-c4fc-4822-991d-4dfbc4cc4870", "6137fc1f-3eeb-41b6-943a-7db78b57e120"],
        "৳ 38,900", "Cameras", "Canon",
    ),
    (
        "Fujifilm Instax Mini 11 Camera",
        "Instant camera with automatic exposure, built-in flash, selfie mirror, close-up lens "
        "attachment, uses Instax Mini film",
        ["Lilac Purple", "Sky Blue", "Blush Pink", "Ice White", "Charcoal Gray"],
        ["329ae581-e4ad-4c75-a356-5baa39244c75", "21b44ca1-1443-46fb-981e-6a0bb297b555"],
        "৳ 7,500", "Cameras", "Fujifilm",
    ),
    (
        "Walton WWM-AF17H Split AC",
        "1.5 Ton Inverter Air Conditioner with R32 refrigerant, energy efficient operation, turbo "
        "cooling mode, self-cleaning function, remote control",
        ["White"],
        ["48f9ed1e-e46d-44f9-a1bb-908c0808a2c7", "bce44452-a056-4ba9-ac11-bcd3ace89250"],
        "৳ 55,000", "Air Conditioner", "Walton",
    ),
    (
        "Sharp SJ-EX455P Refrigerator",
        "420L Double Door Refrigerator with Plasmacluster Ion Technology, hybrid cooling system, "
        "large vegetable case, door lock",
        ["Silver", "White"],
        ["9f280217-4649-4e8e-96fa-4370e55a28b2", "81013091-619b-4237-ab81-6d44892cca1b"],
        "৳ 68,500", "Refrigerators", "Sharp",
    ),
    (
        "Singer Washing Machine 7kg",
        "Front loading automatic washing machine, 7kg capacity, multiple wash programs, stainless "
        "steel drum, child lock",
        ["White", "Silver"],
        ["9c9223d7-0b34-49cf-8388-582cbac36a80", "5bd4dd6b-0106-4eef-a87e-285e4d7c9b8d"],
        "৳ 35,800", "Washing Machines", "Singer",
    ),
    (
        "Philips Air Fryer HD9200",
        "4.1L Air Fryer with Rapid Air technology, 200°C temperature control, 60-minute timer, "
        "dishwasher safe parts",
        ["Black", "White"],
        ["6b3e8748-7e6f-4308-9e15-bebf90312bcb", "24715f41-2f8f-4249-b43b-032a847112d6"],
        "৳ 12,900", "Kitchen Appliances", "Philips",
    ),
    (
        "Miyako Rice Cooker 2.8L",
        "2.8 Liter automatic rice cooker with non-stick inner pot, keep warm function, steam "
        "cooking tray",
        ["White", "Silver"],
        ["384c2f24-fd6c-4cf7-8454-4f87c90e8956", "556889f3-7334-4533-94f7-02e957974c16"],
        "৳ 3,200", "Kitchen Appliances", "Miyako",
    ),
    (
        "HP DeskJet 2320 Printer",
        "All-in-One Color Inkjet Printer with print, scan and copy, USB 2.0 connectivity, HP Smart "
        "app compatible",
        ["White"],
        ["0e61a68b-ef5c-4f1d-a8d6-4ca201c90b7a", "f6bcba78-05a9-46db-8bfe-1d223db7044b"],
        "৳ 8,500", "Printers & Scanners", "HP",
    ),
    (
        "Xiaomi Mi Band 7 Smart Watch",
        "1.62-inch AMOLED display, 12-day battery life, 110+ workout modes, 5ATM water resistance, "
        "heart rate and sleep tracking",
        ["Black", "Orange", "Olive", "Navy Blue"],
        ["2decd7f3-7fd9-43c1-a654-69b2f576668e", "7b662fba-d42e-40b1-afbd-26700e878989"],
        "৳ 4,999", "Wearables", "Xiaomi",
    ),
    (
        "Apple Watch SE 2nd Generation",
        "Retina display, S8 SiP processor, health sensors, Crash Detection, water resistant to "
        "50 meters, watchOS 9",
        ["Midnight", "Starlight", "Silver"],
        ["5220460f-9641-4f6f-8fb6-57fca0bbf564", "c59c1617-258f-4c9a-9eed-3bc4769fc5cb"],
        "৳ 32,900", "Wearables", "Apple",
    ),
]


def fallback_catalog(source_url: str, scraped_at: Optional[str] = None) -> List[ProductRecord]:
    """
    Return the fixed fallback records, fully normalized.

    Args:
        source_url: Provenance URL stamped on every record
        scraped_at: Provenance timestamp (defaults to now)
    """
    scraped_at = scraped_at or datetime.now().isoformat()
    return [
        ProductRecord(
            id=f"fallback_{index:02d}",
            name=name,
            description=description,
            images=tuple(IMAGE_BASE + image_id + '.png' for image_id in image_ids),
            price=price,
            colors=tuple(colors),
            category=category,
            source_url=source_url,
            scraped_at=scraped_at,
            brand=brand,
        )
        for index, (name, description, colors, image_ids, price, category, brand)
        in enumerate(FALLBACK_PRODUCTS, start=1)
    ]
