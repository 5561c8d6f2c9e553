"""
Shared fixtures: small raw tables in the shape of the real exports
"""
import pandas as pd
import pytest

from config import SESSION_COLUMNS, HOTSPOT_COLUMNS


@pytest.fixture
def raw_sessions():
    """Raw session rows as data_loader.load_sessions returns them"""
    rows = [
        # session_id, site, start, stop, in, out, device, os, browser, langue
        ["s1", "notre dame", "2017-04-02T10:00:00", "2017-04-02T10:30:00", "1048576", "2097152",
         "iPhone9,1", "iOS", "Mobile Safari", "fr_FR"],
        ["s2", "Hotel de Ville", "2017-04-01T09:00:00", "2017-04-01T09:45:00", "524288", None,
         "Samsung SM-G930F", "Android 7.0", "Chrome Mobile", "en"],
        ["s3", "Parc Inconnu", "2017-04-03T18:15:00", "2017-04-03T18:05:00", None, "1048576",
         "PC", "Windows 10", "Mozilla/5.0", "DE"],
        ["s4", "HDV", "not a timestamp", "2017-04-03T20:00:00", "2048", "4096",
         None, None, None, None],
        ["s5", "Bibliotheque Faidherbe", "2017-04-01T08:00:00", "2017-04-01T08:20:00", "0", "0",
         "L-EMENT 741", "Android 6.0", "Android Browser", "es_ES"],
    ]
    return pd.DataFrame(rows, columns=SESSION_COLUMNS, dtype=object)


@pytest.fixture
def raw_catalog():
    rows = [
        ["42", "Notre-Dame de Paris", "6 Parvis Notre-Dame", "75004", "Paris", "48.853, 2.349"],
        ["7", "Hotel de Ville", "Place de l'Hotel de Ville", "75004", "Paris", "48.8564, 2.3524"],
        ["13", "Bibliotheque Faidherbe", "18 rue Faidherbe", "75011", "Paris", None],
    ]
    return pd.DataFrame(rows, columns=HOTSPOT_COLUMNS, dtype=object)


@pytest.fixture
def raw_correspondence():
    rows = [
        ["notre dame", "Notre-Dame", "42"],
        ["Notre Dame", "Notre-Dame", "42"],
        ["NOTRE-DAME", "Notre-Dame", "42"],
        ["Hotel de Ville", "Hôtel de Ville", "7"],
        ["HDV", "Hôtel de Ville", "7"],
        ["Bibliotheque Faidherbe", "Bibliothèque Faidherbe", "13"],
        ["Kiosque Disparu", "Kiosque", "99"],
    ]
    return pd.DataFrame(rows, columns=["Site.1", "Site.Clean", "Id"], dtype=object)


@pytest.fixture
def input_files(tmp_path, raw_sessions, raw_catalog, raw_correspondence):
    """The three inputs written to disk with their real delimiters and headers"""
    sessions_path = tmp_path / "sessions.csv"
    raw_sessions.rename(columns={"langue": "Langue"}).to_csv(
        sessions_path, sep=";", index=False, na_rep="NULL"
    )

    catalog_path = tmp_path / "sites.csv"
    raw_catalog.rename(columns={
        "Id": "Identifiant",
        "Nom": "Nom du site",
        "Address": "Adresse",
        "CP": "Code postal",
        "City": "Ville",
        "GeoPoint": "Geo Point",
    }).to_csv(catalog_path, sep=";", index=False)

    correspondence_path = tmp_path / "correspondance.csv"
    raw_correspondence.to_csv(correspondence_path, index=False)

    return {
        "sessions": sessions_path,
        "hotspots": catalog_path,
        "correspondence": correspondence_path,
    }
