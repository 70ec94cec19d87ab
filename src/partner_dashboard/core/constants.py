"""
Static lookup tables: header synonyms, legacy column positions,
lead statuses and the offline city gazetteer.
"""
from typing import Dict, List, NamedTuple, Tuple


class FieldSpec(NamedTuple):
    """Header candidates for one logical field plus its legacy column index"""
    candidates: Tuple[str, ...]
    fallback: int = -1


UNKNOWN_LABEL = "Unbekannt"
DEFAULT_COUNTRY_LABEL = "Deutschland"
UNKNOWN_OWNER_LABEL = "Unbekannter Vermieter"
VEHICLE_LABEL_PREFIX = "Fahrzeug"

ONBOARDING_WINDOW_DAYS = 31
CLOSED_LEAD_RETENTION_DAYS = 7
GEO_BUCKET_PRECISION = 4
EARTH_RADIUS_KM = 6371.0

# Data rows start on sheet row 2 (row 1 holds the header)
HEADER_ROW_OFFSET = 2


# ===== Header synonyms per table =====
# Candidates are matched after header normalization, first match wins.

INVENTORY_FIELDS: Dict[str, FieldSpec] = {
    "country": FieldSpec(("land", "country"), 6),
    "region": FieldSpec(("region", "bundesland", "staat"), 5),
    "owner_id": FieldSpec(("vermieter_id", "partner_id")),
    "owner_name": FieldSpec(("vermieter_name", "vermieter", "partner"), 0),
    "vehicle_id": FieldSpec(("fahrzeug_id", "id")),
    "vehicle_label": FieldSpec(("fahrzeug_label", "fahrzeug_name", "fahrzeug", "modell"), 1),
    "vehicle_type": FieldSpec(("fahrzeugtyp", "typ", "segment"), 3),
    "city": FieldSpec(("stadt", "city"), 4),
    "status": FieldSpec(("status", "state"), 7),
    "listed_at": FieldSpec(
        ("listed_at", "online_seit", "onboarded_at", "letzte_aenderung", "letzte_änderung")
    ),
    "offboarded_at": FieldSpec(("offboarded_at", "offline_seit")),
    "latitude": FieldSpec(("latitude", "lat", "breitengrad")),
    "longitude": FieldSpec(("longitude", "lng", "laengengrad", "längengrad")),
    "manufacturer": FieldSpec(("hersteller", "manufacturer", "marke", "brand"), 2),
    "street": FieldSpec(
        ("strasse", "straße", "stra_e", "street", "straße_hausnummer", "stra_e_hausnummer")
    ),
    "postal_code": FieldSpec(("plz", "postal_code", "postleitzahl", "zip", "zip_code")),
    "address": FieldSpec(("standort", "adresse", "address")),
}

OWNER_FIELDS: Dict[str, FieldSpec] = {
    "owner_id": FieldSpec(("vermieter_id", "partner_id"), 0),
    "owner_name": FieldSpec(("vermieter_name", "name", "vermieter"), 1),
    "country": FieldSpec(("land", "country"), 2),
    "region": FieldSpec(("region", "bundesland", "staat", "province"), 3),
    "phone": FieldSpec(("telefon", "phone"), 3),
    "email": FieldSpec(("email",), 4),
    "website": FieldSpec(("domain", "website"), 5),
    "partner_since": FieldSpec(("partner_since", "seit"), 6),
    "status": FieldSpec(("status",), 7),
    "address": FieldSpec(("adresse", "address", "standort"), 8),
    "city": FieldSpec(("stadt", "city"), 9),
    "postal_code": FieldSpec(("plz", "postal_code", "postleitzahl", "zip", "zip_code"), 10),
    "street": FieldSpec(("strasse", "straße", "street", "stra_e"), 11),
    "international_customers": FieldSpec(
        ("internationale_kunden", "international", "intl_kunden"), 12
    ),
    "commission": FieldSpec(("provision", "commission"), 13),
    "ranking": FieldSpec(("ranking", "bewertung"), 14),
    "experience_years": FieldSpec(("erfahrung_jahre", "erfahrung", "experience"), 15),
    "notes": FieldSpec(("notizen", "notes", "kommentar"), 16),
    "last_change_date": FieldSpec(
        ("letzte_aenderung", "letzte_änderung", "last_change", "last_update"), 17
    ),
}

INQUIRY_FIELDS: Dict[str, FieldSpec] = {
    "vehicle_id": FieldSpec(("fahrzeug_id", "id"), 0),
    "vehicle_type": FieldSpec(("fahrzeugtyp", "typ", "segment"), 2),
    "city": FieldSpec(("stadt", "city"), 2),
    "requests": FieldSpec(("anfragen", "requests")),
    "bookings": FieldSpec(("mieten", "bookings")),
    "created_at": FieldSpec(("datum", "created_at")),
}

MISSING_INVENTORY_FIELDS: Dict[str, FieldSpec] = {
    "country": FieldSpec(("land", "country")),
    "region": FieldSpec(("region", "bundesland")),
    "city": FieldSpec(("stadt", "city"), 0),
    "vehicle_type": FieldSpec(("fahrzeugtyp", "typ"), 1),
    "count": FieldSpec(("anzahl_fehlend", "anzahl"), 2),
    "priority": FieldSpec(("prio", "priorität", "priority"), 3),
    "comment": FieldSpec(("kommentar", "notes"), 4),
}

PENDING_LEAD_FIELDS: Dict[str, FieldSpec] = {
    "date": FieldSpec(("datum", "date"), 0),
    "channel": FieldSpec(("kanal", "channel", "quelle"), 1),
    "region": FieldSpec(("region", "bundesland"), 2),
    "owner_name": FieldSpec(("vermieter_name", "vermieter", "name"), 3),
    "vehicle_label": FieldSpec(("fahrzeug_label", "fahrzeug", "modell"), 4),
    "manufacturer": FieldSpec(("manufacturer", "marke"), 5),
    "vehicle_type": FieldSpec(("fahrzeugtyp", "typ"), 6),
    "city": FieldSpec(("stadt", "city"), 7),
    "country": FieldSpec(("land", "country"), 8),
    "comment": FieldSpec(("kommentar", "notes", "bemerkung"), 9),
    "street": FieldSpec(("strasse", "street"), 10),
    "postal_code": FieldSpec(("plz", "postal_code", "zip"), 11),
    "phone": FieldSpec(("telefon", "phone")),
    "email": FieldSpec(("email", "mail")),
    "website": FieldSpec(("website", "domain", "url")),
    "international_customers": FieldSpec(
        ("internationale_kunden", "international", "intl_kunden")
    ),
    "commission": FieldSpec(("provision", "commission")),
    "ranking": FieldSpec(("ranking",)),
    "experience_years": FieldSpec(("erfahrung_jahre", "erfahrung", "experience_years")),
    "owner_notes": FieldSpec(("notizen", "vermieter_notizen")),
    "status": FieldSpec(("status",), 12),
    "status_updated_at": FieldSpec(
        ("status_updated_at", "status_geaendert", "status_date"), 13
    ),
}


# ===== Synonyms used when writing rows against an existing header =====
# Keys are the canonical column names of the workbook.

INVENTORY_WRITE_SYNONYMS: Dict[str, List[str]] = {
    "vermieter_name": ["vermieter", "vermietername", "partner"],
    "fahrzeug_label": ["fahrzeug", "fahrzeugname", "fahrzeug_name", "modell"],
    "manufacturer": ["marke", "brand", "hersteller"],
    "fahrzeugtyp": ["typ", "segment"],
    "stadt": ["city", "ort"],
    "region": ["bundesland", "staat", "province"],
    "standort": ["adresse", "anschrift", "adresszeile"],
    "land": ["country"],
    "status": ["state"],
    "notizen": ["notes", "kommentar", "comment"],
    "latitude": ["lat", "breitengrad"],
    "longitude": ["lng", "laengengrad", "längengrad"],
    "plz": ["postal_code", "postleitzahl", "zip", "zip_code"],
    "strasse": ["straße", "stra_e", "street", "straße_hausnummer", "stra_e_hausnummer"],
    "listed_at": ["online_seit", "onboarded_at"],
    "letzte_aenderung": ["letzte_änderung", "last_change", "last_update"],
}

OWNER_WRITE_SYNONYMS: Dict[str, List[str]] = {
    "vermieter_name": ["vermieter", "partner", "name"],
    "land": ["country"],
    "region": ["bundesland", "staat", "province"],
    "stadt": ["city", "ort"],
    "adresse": ["standort", "anschrift"],
    "telefon": ["phone"],
    "email": ["mail"],
    "domain": ["website", "url"],
    "plz": ["postal_code", "postleitzahl", "zip", "zip_code"],
    "strasse": ["street", "straße", "stra_e", "straße_hausnummer", "stra_e_hausnummer"],
    "internationale_kunden": ["international", "intl_kunden", "international_customers"],
    "provision": ["commission", "provision_satze", "provision_satz"],
    "ranking": ["bewertung"],
    "erfahrung_jahre": ["erfahrung", "experience_years"],
    "notizen": ["notes", "kommentar", "comment"],
    "letzte_aenderung": ["letzte_änderung", "last_change", "last_update"],
}

PENDING_LEAD_WRITE_SYNONYMS: Dict[str, List[str]] = {
    "datum": ["date"],
    "kanal": ["channel", "quelle"],
    "region": ["bundesland", "state"],
    "vermieter_name": ["vermieter", "name", "partner"],
    "fahrzeug_label": ["fahrzeug", "modell"],
    "manufacturer": ["marke", "brand"],
    "fahrzeugtyp": ["typ", "segment"],
    "stadt": ["city", "ort"],
    "land": ["country"],
    "kommentar": ["notes", "bemerkung"],
    "status": [],
}

MISSING_INVENTORY_WRITE_SYNONYMS: Dict[str, List[str]] = {
    "stadt": ["city", "ort"],
    "region": ["bundesland", "state"],
    "land": ["country"],
    "fahrzeugtyp": ["fahrzeug_typ", "typ", "segment"],
    "anzahl_fehlend": ["anzahl", "missing", "anzahl_missing"],
    "prio": ["prioritaet", "priorität", "priority"],
    "kommentar": ["notes", "bemerkung", "note"],
}

# Owner-name column candidates used when deleting a partner's rows
OWNER_NAME_COLUMNS: Tuple[str, ...] = ("vermieter_name", "vermieter", "partner", "name")


# ===== Lead statuses =====
# Sheet cells may carry either the English or the German label.

LEAD_STATUS_ALIASES: Dict[str, str] = {
    "requested": "Requested",
    "angefragt": "Requested",
    "in negotiation": "In Negotiation",
    "in verhandlung": "In Negotiation",
    "contract signed": "Contract Signed",
    "vertrag unterschrieben": "Contract Signed",
    "rejected": "Rejected",
    "abgelehnt": "Rejected",
}


# ===== Country normalization =====
# Substring rules, evaluated in order, mapping localized names to a code.

COUNTRY_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("deutsch", "germany"), "de"),
    (("austria", "österreich"), "at"),
    (("schweiz", "switzerland"), "ch"),
    (("united kingdom", "uk"), "uk"),
    (("united arab emirates", "uae"), "ae"),
    (("australien", "australia"), "au"),
    (("usa", "vereinigte staaten", "united states"), "us"),
]

# Countries tried, in order, when a city lookup misses in its own country
FALLBACK_COUNTRY_CODES: List[str] = ["de", "at", "ch", "uk", "us", "ae", "au"]


# ===== Offline gazetteer =====
# Keys are "<country code>:<normalized city>". City keys only hold ASCII
# word characters (umlauts are transliterated, e.g. "koln", "moembris").

CITY_COORDINATES: Dict[str, Tuple[float, float]] = {
    "de:berlin": (52.520008, 13.404954),
    "de:hamburg": (53.551086, 9.993682),
    "de:munchen": (48.137154, 11.576124),
    "de:munich": (48.137154, 11.576124),
    "de:frankfurt": (50.110924, 8.682127),
    "de:frankfurt am main": (50.110924, 8.682127),
    "de:weiterstadt": (49.903333, 8.5925),
    "de:darmstadt": (49.872825, 8.651192),
    "de:recklinghausen": (51.614064, 7.197949),
    "de:karlsruhe": (49.00689, 8.403653),
    "de:mannheim": (49.487459, 8.466039),
    "de:essen": (51.45657, 7.01228),
    "de:rodgau": (50.026908, 8.877219),
    "de:braunschweig": (52.268875, 10.526769),
    "de:bremen": (53.079296, 8.801694),
    "de:moembris": (50.074264, 9.15739),
    "de:gunzburg": (48.45276, 10.27364),
    "de:beckum": (51.755628, 8.040778),
    "de:lippstadt": (51.673858, 8.344886),
    "de:munster": (51.960665, 7.626135),
    "de:stuttgart": (48.775846, 9.182932),
    "de:gelsenkirchen": (51.517744, 7.085717),
    "de:wernau": (48.6959, 9.41761),
    "de:albstadt": (48.21408, 9.02344),
    "de:norderstedt": (53.7089, 9.99449),
    "de:mainz": (49.992862, 8.247253),
    "de:siegburg": (50.800596, 7.207531),
    "de:duisburg": (51.434407, 6.762329),
    "de:heilbronn": (49.142693, 9.210879),
    "de:ludwigsburg": (48.896435, 9.184904),
    "de:anzing": (48.15001, 11.85891),
    "de:gottingen": (51.54128, 9.9158),
    "de:bad nenndorf": (52.33771, 9.37581),
    "de:koblenz": (50.356943, 7.588995),
    "de:kassel": (51.312711, 9.479746),
    "de:koln": (50.937531, 6.960279),
    "de:langenfeld": (51.10819, 6.94716),
    "de:schloss holte-stukenbrock": (51.8939, 8.6175),
    "de:bielefeld": (52.030228, 8.532471),
    "de:heidesheim": (49.986, 8.1506),
    "de:stuttgart-zuffenhausen": (48.8329, 9.1619),
    "de:magdeburg": (52.120533, 11.627624),
    "at:wien": (48.208174, 16.373819),
    "at:salzburg": (47.80949, 13.05501),
    "at:innsbruck": (47.269212, 11.404102),
    "at:kirchbichl": (47.528, 12.067),
    "at:leoben": (47.384, 15.091),
    "at:volders": (47.283, 11.567),
    "at:st andra": (46.829, 15.271),
    "at:st andrae": (46.829, 15.271),
    "at:eitweg": (46.809, 15.3),
    "at:weiden am see": (47.933, 16.87),
    "ch:zurich": (47.376887, 8.541694),
    "ch:bern": (46.947974, 7.447447),
    "ch:geneva": (46.204391, 6.143158),
    "ch:basel": (47.559599, 7.588576),
    "ch:zug": (47.166167, 8.515495),
    "uk:london": (51.507351, -0.127758),
    "uk:manchester": (53.480759, -2.242631),
    "uk:birmingham": (52.486243, -1.890401),
    "uk:edinburgh": (55.953251, -3.188267),
    "uk:glasgow": (55.864237, -4.251806),
    "us:new york": (40.712776, -74.005974),
    "us:los angeles": (34.052235, -118.243683),
    "us:miami": (25.761681, -80.191788),
    "us:san francisco": (37.774929, -122.419418),
    "us:las vegas": (36.169941, -115.139832),
    "ae:dubai": (25.204849, 55.270782),
    "ae:abu dhabi": (24.453884, 54.3773438),
    "au:sydney": (-33.86882, 151.209296),
    "au:melbourne": (-37.813629, 144.963058),
    "au:brisbane": (-27.469771, 153.025124),
}
