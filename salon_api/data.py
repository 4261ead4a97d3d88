# salon_api/data.py

# Catalog used to seed an empty database: duration in minutes, price in euros
DEFAULT_FORMULAS = [
    {"title": "Soin visage éclat", "description": "Nettoyage, gommage et masque", "price": 55.0, "duration": 60},
    {"title": "Soin visage express", "description": "Nettoyage et hydratation", "price": 30.0, "duration": 30},
    {"title": "Modelage relaxant", "description": "Modelage corps aux huiles", "price": 70.0, "duration": 60},
    {"title": "Manucure", "description": "Limage, cuticules et vernis", "price": 25.0, "duration": 45},
    {"title": "Épilation jambes complètes", "description": "", "price": 35.0, "duration": 45},
]
