from rechtsintake.engine.person_extractor import (
    ExtractedPersonData,
    extract_person_data,
    is_person_data_complete,
)

from .conftest import assistant, user


def test_name_and_email_scenario():
    data = extract_person_data([
        user("Mein Name ist Anna Schmidt, meine Email ist anna@example.de"),
    ])

    assert data.full_name == "Anna Schmidt"
    assert data.email == "anna@example.de"
    assert data.client_type == "private"
    assert data.preferred_contact_method == "email"
    assert is_person_data_complete(data)


def test_only_user_turns_are_read():
    data = extract_person_data([
        assistant("Mein Name ist Max Berater, erreichbar unter kanzlei@example.de"),
        user("Danke"),
    ])
    assert data.email is None
    assert data.full_name is None


def test_phone_number_is_normalised():
    data = extract_person_data([user("Sie erreichen mich unter +49 171 1234567")])
    assert data.phone_number == "+491711234567"


def test_phone_preference_beats_email():
    data = extract_person_data([
        user("Ich heiße Jonas Weber, jonas@example.de, bitte rufen Sie mich an: 030 1234567"),
    ])
    assert data.full_name == "Jonas Weber"
    assert data.phone_number == "0301234567"
    assert data.preferred_contact_method == "phone"


def test_no_contact_method_when_phone_without_preference():
    data = extract_person_data([user("Nummer: 0171 9876543")])
    assert data.preferred_contact_method is None


def test_signature_name():
    data = extract_person_data([user("Vielen Dank für die Hilfe.\nViele Grüße\nPetra Lange")])
    assert data.full_name == "Petra Lange"


def test_free_line_name_fallback_skips_stopwords():
    data = extract_person_data([user("Hallo"), user("klaus meyer")])
    assert data.full_name == "Klaus Meyer"


def test_company_client():
    data = extract_person_data([
        user("Ich schreibe für unsere Firma Muster Bau GmbH aus Köln"),
    ])
    assert data.client_type == "company"
    assert data.company_name == "Muster Bau GmbH aus Köln"
    assert data.location == "Köln"


def test_private_indicator_wins_over_company_words():
    data = extract_person_data([user("Ich bin als Privatperson hier, nicht für die Firma.")])
    assert data.client_type == "private"
    assert data.company_name is None


def test_location_from_postal_code():
    data = extract_person_data([user("Meine Adresse: Hauptstraße 5, 10115 Berlin")])
    assert data.location == "Berlin"


def test_country_names_are_not_locations():
    data = extract_person_data([user("Ich lebe in Deutschland")])
    assert data.location is None


def test_completeness_requires_name_and_email():
    assert not is_person_data_complete(ExtractedPersonData(full_name="Anna Schmidt"))
    assert not is_person_data_complete(ExtractedPersonData(email="anna@example.de"))
    assert is_person_data_complete(
        ExtractedPersonData(full_name="Anna Schmidt", email="anna@example.de")
    )
