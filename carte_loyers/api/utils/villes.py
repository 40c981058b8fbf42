# carte_loyers/api/utils/villes.py
"""Villes connues (nom, code postal principal, code INSEE de la commune)."""

from typing import Dict, List

VILLES_SEED: List[Dict[str, str]] = [
    {"nom": "Paris", "code_postal": "75001", "code_insee": "75056"},
    {"nom": "Marseille", "code_postal": "13001", "code_insee": "13055"},
    {"nom": "Lyon", "code_postal": "69001", "code_insee": "69123"},
    {"nom": "Toulouse", "code_postal": "31000", "code_insee": "31555"},
    {"nom": "Nice", "code_postal": "06000", "code_insee": "06088"},
    {"nom": "Nantes", "code_postal": "44000", "code_insee": "44109"},
    {"nom": "Montpellier", "code_postal": "34000", "code_insee": "34172"},
    {"nom": "Strasbourg", "code_postal": "67000", "code_insee": "67482"},
    {"nom": "Bordeaux", "code_postal": "33000", "code_insee": "33063"},
    {"nom": "Lille", "code_postal": "59000", "code_insee": "59350"},
    {"nom": "Rennes", "code_postal": "35000", "code_insee": "35238"},
    {"nom": "Reims", "code_postal": "51100", "code_insee": "51454"},
    {"nom": "Saint-Étienne", "code_postal": "42000", "code_insee": "42218"},
    {"nom": "Toulon", "code_postal": "83000", "code_insee": "83137"},
    {"nom": "Le Havre", "code_postal": "76600", "code_insee": "76351"},
    {"nom": "Grenoble", "code_postal": "38000", "code_insee": "38185"},
    {"nom": "Dijon", "code_postal": "21000", "code_insee": "21231"},
    {"nom": "Angers", "code_postal": "49000", "code_insee": "49007"},
    {"nom": "Nîmes", "code_postal": "30000", "code_insee": "30189"},
    {"nom": "Villeurbanne", "code_postal": "69100", "code_insee": "69266"},
    {"nom": "Clermont-Ferrand", "code_postal": "63000", "code_insee": "63113"},
    {"nom": "Le Mans", "code_postal": "72000", "code_insee": "72181"},
    {"nom": "Aix-en-Provence", "code_postal": "13090", "code_insee": "13001"},
    {"nom": "Brest", "code_postal": "29200", "code_insee": "29019"},
    {"nom": "Tours", "code_postal": "37000", "code_insee": "37261"},
    {"nom": "Amiens", "code_postal": "80000", "code_insee": "80021"},
    {"nom": "Limoges", "code_postal": "87000", "code_insee": "87085"},
    {"nom": "Perpignan", "code_postal": "66000", "code_insee": "66136"},
    {"nom": "Metz", "code_postal": "57000", "code_insee": "57463"},
    {"nom": "Besançon", "code_postal": "25000", "code_insee": "25056"},
    {"nom": "Orléans", "code_postal": "45000", "code_insee": "45234"},
    {"nom": "Rouen", "code_postal": "76000", "code_insee": "76540"},
    {"nom": "Mulhouse", "code_postal": "68100", "code_insee": "68224"},
    {"nom": "Caen", "code_postal": "14000", "code_insee": "14118"},
    {"nom": "Nancy", "code_postal": "54000", "code_insee": "54395"},
]
