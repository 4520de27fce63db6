"""Static reference data served to registration and lookup screens."""

from app.models.farmer_profile import FarmType
from app.models.owner_profile import BusinessType

FARM_TYPE_LABELS = {
    FarmType.CROP: "Crop Farming",
    FarmType.LIVESTOCK: "Livestock",
    FarmType.MIXED: "Mixed Farming",
    FarmType.ORGANIC: "Organic Farming",
    FarmType.OTHER: "Other",
}

BUSINESS_TYPE_LABELS = {
    BusinessType.INDIVIDUAL: "Individual",
    BusinessType.COMPANY: "Company",
    BusinessType.PARTNERSHIP: "Partnership",
}

COMMON_CROP_TYPES = [
    "rice", "wheat", "sugarcane", "cotton", "groundnut",
    "coconut", "banana", "mango", "tomato", "onion",
    "potato", "brinjal", "okra", "chilli", "turmeric",
]

COMMON_LIVESTOCK_TYPES = [
    "cattle", "buffalo", "goat", "sheep", "chicken",
    "duck", "fish", "pig", "horse",
]

COMMON_EQUIPMENT_TYPES = [
    "tractor", "harvester", "plough", "cultivator",
    "seed_drill", "sprayer", "thresher", "rotavator",
    "disc_harrow", "power_tiller",
]

TAMIL_NADU_DISTRICTS = [
    "Ariyalur", "Chengalpattu", "Chennai", "Coimbatore",
    "Cuddalore", "Dharmapuri", "Dindigul", "Erode",
    "Kallakurichi", "Kanchipuram", "Kanyakumari", "Karur",
    "Krishnagiri", "Madurai", "Mayiladuthurai", "Nagapattinam",
    "Namakkal", "Nilgiris", "Perambalur", "Pudukkottai",
    "Ramanathapuram", "Ranipet", "Salem", "Sivaganga",
    "Tenkasi", "Thanjavur", "Theni", "Thoothukudi",
    "Tiruchirappalli", "Tirunelveli", "Tirupathur",
    "Tiruppur", "Tiruvallur", "Tiruvannamalai", "Tiruvarur",
    "Vellore", "Viluppuram", "Virudhunagar",
]


def registration_config() -> dict:
    return {
        "farm_types": {t.value: label for t, label in FARM_TYPE_LABELS.items()},
        "business_types": {t.value: label for t, label in BUSINESS_TYPE_LABELS.items()},
        "common_crop_types": COMMON_CROP_TYPES,
        "common_livestock_types": COMMON_LIVESTOCK_TYPES,
        "common_equipment_types": COMMON_EQUIPMENT_TYPES,
        "tamil_nadu_districts": TAMIL_NADU_DISTRICTS,
    }
