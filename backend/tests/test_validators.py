import pytest

from rechtsintake.engine.validators import (
    is_valid_client_type,
    is_valid_contact_method,
    is_valid_date,
    is_valid_email,
    is_valid_urgency_level,
    parse_german_date,
    validate_case_data,
    validate_person_data,
)


def valid_person(**overrides):
    data = {
        "full_name": "Anna Schmidt",
        "email": "anna@example.de",
        "client_type": "private",
        "consent_share_with_lawyer": True,
    }
    data.update(overrides)
    return data


@pytest.mark.parametrize("value, expected", [
    ("anna@example.de", True),
    ("a.b+c@sub.example.com", True),
    ("anna@example", False),
    ("anna example.de", False),
    ("", False),
    (None, False),
])
def test_is_valid_email(value, expected):
    assert is_valid_email(value) is expected


@pytest.mark.parametrize("value, expected", [
    ("31.12.2023", "2023-12-31"),
    ("1.3.2024", "2024-03-01"),
    ("2024-01-05", "2024-01-05"),
    ("31.02.2024", None),
    ("29.02.2023", None),
    ("morgen", None),
    ("", None),
    (None, None),
])
def test_parse_german_date(value, expected):
    assert parse_german_date(value) == expected


def test_is_valid_date_rejects_impossible_calendar_dates():
    assert is_valid_date("29.02.2024")
    assert is_valid_date("2024-03-15")
    assert not is_valid_date("31.04.2024")
    assert not is_valid_date("15/03/2024")


def test_enumerations():
    assert is_valid_urgency_level("high")
    assert not is_valid_urgency_level("critical")
    assert is_valid_client_type("company")
    assert not is_valid_client_type("firma")
    assert is_valid_contact_method("phone")
    assert not is_valid_contact_method("fax")


def test_validate_person_data_accepts_minimal_private_person():
    result = validate_person_data(valid_person())
    assert result.valid
    assert result.errors == []


def test_validate_person_data_collects_every_error():
    result = validate_person_data({
        "full_name": "A",
        "email": "kaputt",
        "client_type": "company",
        "preferred_contact_method": "fax",
    })
    assert not result.valid
    assert result.errors == [
        "Name muss mindestens 2 Zeichen haben",
        "Gültige E-Mail-Adresse erforderlich",
        "Firmenname erforderlich für Firmenmandanten",
        'Kontaktmethode muss "email" oder "phone" sein',
        "Zustimmung zur Weitergabe an Anwalt erforderlich",
    ]


def test_validate_person_data_unknown_client_type():
    result = validate_person_data(valid_person(client_type="verein"))
    assert result.errors == ['Mandantentyp muss "private" oder "company" sein']


def test_validate_person_data_company_with_name():
    result = validate_person_data(valid_person(client_type="company", company_name="Muster GmbH"))
    assert result.valid


def test_validate_person_data_requires_boolean_consent():
    result = validate_person_data(valid_person(consent_share_with_lawyer="ja"))
    assert result.errors == ["Zustimmung zur Weitergabe an Anwalt erforderlich"]


def test_validate_case_data_ok():
    result = validate_case_data({
        "conversation_id": "c1",
        "urgency_level": "medium",
        "deadline_date": "15.03.2024",
        "estimated_value": 0,
    })
    assert result.valid


def test_validate_case_data_collects_every_error():
    result = validate_case_data({
        "urgency_level": "sofort",
        "deadline_date": "31.02.2024",
        "estimated_value": -5,
    })
    assert result.errors == [
        "Conversation ID erforderlich",
        'Dringlichkeit muss "low", "medium" oder "high" sein',
        "Ungültiges Datumsformat",
        "Streitwert muss eine positive Zahl sein",
    ]


@pytest.mark.parametrize("value", ["1000", True, -0.5])
def test_validate_case_data_rejects_non_numeric_or_negative_value(value):
    result = validate_case_data({"conversation_id": "c1", "estimated_value": value})
    assert result.errors == ["Streitwert muss eine positive Zahl sein"]
