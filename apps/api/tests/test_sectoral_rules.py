"""Eligibility predicates: band edges, completion status and bad input."""
from datetime import date

from apps.api.utils.age import INVALID_AGE
from apps.api.utils.constants import AUTO_SECTORAL_FIELDS, INDIGENOUS_ETHNICITIES
from apps.api.utils.sectoral_rules import (
    evaluate_sectoral_flags,
    is_employed,
    is_indigenous_people,
    is_out_of_school_children,
    is_out_of_school_youth,
    is_senior_citizen,
    is_unemployed,
)


def test_out_of_school_children_age_band():
    assert not is_out_of_school_children(5, 'elementary', 'under_graduate')
    assert is_out_of_school_children(6, 'elementary', 'under_graduate')
    assert is_out_of_school_children(14, 'elementary', 'under_graduate')
    assert not is_out_of_school_children(15, 'elementary', 'under_graduate')


def test_out_of_school_children_requires_basic_level_under_graduate():
    assert not is_out_of_school_children(10, 'elementary', 'graduate')
    assert is_out_of_school_children(13, 'high_school', 'under_graduate')
    assert not is_out_of_school_children(10, 'college', 'under_graduate')
    assert not is_out_of_school_children(10, 'none', 'under_graduate')
    assert not is_out_of_school_children(10, None, 'under_graduate')
    assert not is_out_of_school_children(10, 'elementary', None)


def test_out_of_school_youth_boundaries():
    assert is_out_of_school_youth(24, 'high_school', 'graduate', 'unemployed')
    assert not is_out_of_school_youth(24, 'college', 'graduate', 'unemployed')
    assert is_out_of_school_youth(24, 'college', 'under_graduate', 'unemployed')
    assert not is_out_of_school_youth(24, 'high_school', 'graduate', 'employed')
    assert not is_out_of_school_youth(25, 'high_school', 'graduate', 'unemployed')
    assert not is_out_of_school_youth(25, None, None, None)
    assert is_out_of_school_youth(15, 'elementary', 'graduate', None)
    assert not is_out_of_school_youth(14, 'elementary', 'graduate', None)


def test_out_of_school_youth_employment_and_education_conditions():
    assert not is_out_of_school_youth(20, 'high_school', 'graduate', 'self_employed')
    assert is_out_of_school_youth(20, 'high_school', 'graduate', 'looking_for_work')
    assert is_out_of_school_youth(20, None, None, 'not_in_labor_force')
    assert is_out_of_school_youth(20, 'none', None, None)
    assert is_out_of_school_youth(20, 'vocational', 'under_graduate', None)
    assert not is_out_of_school_youth(20, 'vocational', 'graduate', None)
    assert not is_out_of_school_youth(20, 'post_graduate', None, None)
    # Unrecognised attainment fails closed
    assert not is_out_of_school_youth(20, 'doctorate', 'under_graduate', None)


def test_senior_citizen_threshold():
    assert not is_senior_citizen(59)
    assert is_senior_citizen(60)
    assert is_senior_citizen(99)
    assert not is_senior_citizen(INVALID_AGE)


def test_labor_force_predicates():
    assert is_employed('employed')
    assert is_employed('self_employed')
    assert not is_employed('underemployed')
    assert is_unemployed('unemployed')
    assert is_unemployed('looking_for_work')
    assert not is_unemployed('student')
    assert not is_employed(None)
    assert not is_unemployed(None)
    assert not is_employed('gig_worker')
    assert not is_unemployed(42)


def test_predicates_normalize_case_and_whitespace():
    assert is_employed(' Employed ')
    assert is_out_of_school_children(8, 'ELEMENTARY', 'Under_Graduate')


def test_indigenous_people_allow_list():
    for name in ('aeta', 'ifugao', 'maranao', 'tausug'):
        assert name in INDIGENOUS_ETHNICITIES
        assert is_indigenous_people(name)
    assert is_indigenous_people('Aeta')
    assert not is_indigenous_people('tagalog')
    assert not is_indigenous_people('cebuano')
    assert not is_indigenous_people(None)
    assert not is_indigenous_people('')
    assert len(INDIGENOUS_ETHNICITIES) >= 30


def test_invalid_age_disqualifies_every_age_band():
    assert not is_out_of_school_children(INVALID_AGE, 'elementary', 'under_graduate')
    assert not is_out_of_school_youth(INVALID_AGE, None, None, None)


def test_evaluate_sectoral_flags_end_to_end_context():
    flags = evaluate_sectoral_flags(
        {
            'birthdate': date(2010, 3, 1),
            'education_attainment': 'high_school',
            'education_status': 'under_graduate',
            'employment_status': None,
            'ethnicity': None,
        },
        today=date(2024, 6, 1),
    )
    assert set(flags) == set(AUTO_SECTORAL_FIELDS)
    assert flags['is_out_of_school_children'] is True
    assert flags['is_out_of_school_youth'] is False
    assert flags['is_senior_citizen'] is False
    assert flags['is_labor_force_employed'] is False
    assert flags['is_unemployed'] is False
    assert flags['is_indigenous_people'] is False


def test_evaluate_sectoral_flags_uses_precomputed_age():
    flags = evaluate_sectoral_flags({'age': 61, 'birthdate': None, 'employment_status': 'retired'})
    assert flags['is_senior_citizen'] is True
    assert flags['is_out_of_school_youth'] is False


def test_evaluate_sectoral_flags_future_birthdate_fails_closed():
    flags = evaluate_sectoral_flags(
        {'birthdate': '2030-01-01', 'education_attainment': 'elementary',
         'education_status': 'under_graduate'},
        today=date(2024, 6, 1),
    )
    assert not any(flags.values())
