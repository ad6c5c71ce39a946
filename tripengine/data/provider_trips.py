"""
Provider trips - Package trips sold by the single provider.
"""
from ..models.catalog import ProviderTrip


CATEGORY_INFO = {
    "adventure": {"label": "Adventure", "description": "Thrilling outdoor experiences"},
    "beach": {"label": "Beach", "description": "Sun, sand and sea"},
    "mountain": {"label": "Mountain", "description": "Peaks, trails and fresh air"},
    "cultural": {"label": "Cultural", "description": "History, art and local traditions"},
    "city-tours": {"label": "City Tours", "description": "Guided tours of iconic cities"},
}


_RAW_TRIPS = [
    {
        "id": "trip-001",
        "name": "Swiss Alps Trek",
        "category": "mountain",
        "description": "Hut-to-hut trekking through the Bernese Oberland.",
        "duration": 7,
        "price": 1899,
        "location": {"country": "Switzerland", "city": "Interlaken"},
        "maxTravelers": 12,
        "difficulty": "challenging",
        "availableDates": [
            {"id": "d1", "startDate": "2026-06-10", "endDate": "2026-06-16", "spotsLeft": 8, "priceModifier": 1.0},
            {"id": "d2", "startDate": "2026-07-15", "endDate": "2026-07-21", "spotsLeft": 3, "priceModifier": 1.2},
            {"id": "d3", "startDate": "2026-08-05", "endDate": "2026-08-11", "spotsLeft": 0, "priceModifier": 1.2},
        ],
    },
    {
        "id": "trip-002",
        "name": "Bali Beach Escape",
        "category": "beach",
        "description": "Five days of surf lessons, temples and sunsets in Uluwatu.",
        "duration": 5,
        "price": 1099,
        "location": {"country": "Indonesia", "city": "Bali"},
        "maxTravelers": 16,
        "difficulty": "easy",
        "availableDates": [
            {"id": "d1", "startDate": "2026-05-02", "endDate": "2026-05-06", "spotsLeft": 10, "priceModifier": 0.9},
            {"id": "d2", "startDate": "2026-12-20", "endDate": "2026-12-24", "spotsLeft": 4, "priceModifier": 1.3},
        ],
    },
    {
        "id": "trip-003",
        "name": "Kyoto Heritage Walk",
        "category": "cultural",
        "description": "Temples, tea ceremonies and the old merchant quarters of Kyoto.",
        "duration": 4,
        "price": 1450,
        "location": {"country": "Japan", "city": "Kyoto"},
        "maxTravelers": 10,
        "difficulty": "easy",
        "availableDates": [
            {"id": "d1", "startDate": "2026-04-01", "endDate": "2026-04-04", "spotsLeft": 2, "priceModifier": 1.25},
            {"id": "d2", "startDate": "2026-10-12", "endDate": "2026-10-15", "spotsLeft": 9, "priceModifier": 1.0},
        ],
    },
    {
        "id": "trip-004",
        "name": "Patagonia Expedition",
        "category": "adventure",
        "description": "Glaciers, kayaking and the W trek in Torres del Paine.",
        "duration": 10,
        "price": 2799,
        "location": {"country": "Chile", "city": "Puerto Natales"},
        "maxTravelers": 8,
        "difficulty": "challenging",
        "availableDates": [
            {"id": "d1", "startDate": "2026-11-20", "endDate": "2026-11-29", "spotsLeft": 5, "priceModifier": 1.0},
        ],
    },
    {
        "id": "trip-005",
        "name": "Paris in a Weekend",
        "category": "city-tours",
        "description": "Guided Louvre visit, Seine cruise and Montmartre food tour.",
        "duration": 3,
        "price": 749,
        "location": {"country": "France", "city": "Paris"},
        "maxTravelers": 20,
        "difficulty": "easy",
        "availableDates": [],
    },
]


provider_trips: list[ProviderTrip] = [ProviderTrip.model_validate(raw) for raw in _RAW_TRIPS]
