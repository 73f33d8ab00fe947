"""Synchronizer: merging auto flags, manual preservation, idempotence."""
from datetime import date, datetime

from apps.api.utils.constants import MANUAL_SECTORAL_FIELDS, SECTORAL_FIELDS
from apps.api.utils.sectoral_sync import build_resident_context, changed_fields, synchronize

TODAY = date(2024, 6, 1)
EARLIER = datetime(2024, 1, 1, 8, 0, 0)
NOW = datetime(2024, 6, 1, 9, 30, 0)


def _context(**overrides):
    context = {
        'birthdate': date(2000, 1, 1),
        'education_attainment': 'high_school',
        'education_status': 'graduate',
        'employment_status': 'employed',
        'ethnicity': None,
    }
    context.update(overrides)
    return context


def _record(**overrides):
    record = {name: False for name in SECTORAL_FIELDS}
    record['updated_at'] = EARLIER
    record.update(overrides)
    return record


def test_end_to_end_scenario_from_empty_record():
    context = _context(
        birthdate=date(2010, 3, 1),
        education_attainment='high_school',
        education_status='under_graduate',
        employment_status=None,
    )
    result = synchronize(None, context, today=TODAY, now=NOW)

    assert result['is_out_of_school_children'] is True
    assert result['is_out_of_school_youth'] is False
    assert result['is_senior_citizen'] is False
    assert all(result[name] is False for name in MANUAL_SECTORAL_FIELDS)
    assert result['updated_at'] == NOW


def test_synchronize_is_idempotent():
    context = _context(birthdate=date(2003, 5, 5), employment_status='unemployed')
    once = synchronize(_record(), context, today=TODAY, now=NOW)
    twice = synchronize(once, context, today=TODAY, now=datetime(2025, 1, 1))
    assert twice == once


def test_unchanged_record_keeps_updated_at():
    context = _context()
    record = _record(is_labor_force_employed=True)
    result = synchronize(record, context, today=TODAY, now=NOW)
    assert result == record
    assert result['updated_at'] == EARLIER


def test_changed_record_gets_new_updated_at():
    record = _record(is_labor_force_employed=True)
    result = synchronize(record, _context(employment_status='unemployed'), today=TODAY, now=NOW)
    assert result['is_labor_force_employed'] is False
    assert result['is_unemployed'] is True
    assert result['updated_at'] == NOW


def test_manual_fields_are_preserved():
    record = _record(
        is_person_with_disability=True,
        is_solo_parent=True,
        is_overseas_filipino_worker=True,
        is_migrant=True,
    )
    result = synchronize(record, _context(birthdate=date(2004, 1, 1), employment_status=None),
                         today=TODAY, now=NOW)

    assert result['is_out_of_school_youth'] is True
    assert result['is_person_with_disability'] is True
    assert result['is_solo_parent'] is True
    assert result['is_overseas_filipino_worker'] is True
    assert result['is_migrant'] is True


def test_operator_values_for_auto_fields_are_overridden():
    record = _record(is_out_of_school_youth=True, is_senior_citizen=True)
    result = synchronize(record, _context(), today=TODAY, now=NOW)
    assert result['is_out_of_school_youth'] is False
    assert result['is_senior_citizen'] is False


def test_registered_senior_reset_when_no_longer_senior():
    record = _record(is_senior_citizen=True, is_registered_senior_citizen=True)
    # Birthdate corrected: resident is actually 59
    result = synchronize(record, _context(birthdate=date(1964, 12, 31)), today=TODAY, now=NOW)
    assert result['is_senior_citizen'] is False
    assert result['is_registered_senior_citizen'] is False
    assert result['updated_at'] == NOW


def test_registered_senior_is_never_auto_set():
    record = _record(is_senior_citizen=False, is_registered_senior_citizen=False)
    result = synchronize(record, _context(birthdate=date(1964, 6, 1)), today=TODAY, now=NOW)
    assert result['is_senior_citizen'] is True
    assert result['is_registered_senior_citizen'] is False


def test_registered_senior_kept_while_senior():
    record = _record(is_senior_citizen=True, is_registered_senior_citizen=True)
    result = synchronize(record, _context(birthdate=date(1950, 1, 1)), today=TODAY, now=NOW)
    assert result['is_registered_senior_citizen'] is True


def test_input_record_is_not_mutated():
    record = _record(is_out_of_school_youth=True)
    snapshot = dict(record)
    synchronize(record, _context(), today=TODAY, now=NOW)
    assert record == snapshot


def test_invalid_birthdate_fails_closed():
    record = _record(is_senior_citizen=True, is_registered_senior_citizen=True)
    result = synchronize(record, _context(birthdate='garbage', employment_status=None),
                         today=TODAY, now=NOW)
    assert result['is_senior_citizen'] is False
    assert result['is_registered_senior_citizen'] is False
    assert result['is_out_of_school_youth'] is False
    assert result['is_out_of_school_children'] is False


def test_build_resident_context_from_mapping_and_object():
    class Stub:
        birthdate = date(1990, 1, 1)
        education_attainment = 'college'
        education_status = 'graduate'
        employment_status = 'employed'
        ethnicity = 'ifugao'
        first_name = 'Juan'

    from_obj = build_resident_context(Stub())
    from_map = build_resident_context({'birthdate': date(1990, 1, 1), 'ethnicity': 'ifugao'})

    assert from_obj['ethnicity'] == 'ifugao'
    assert 'first_name' not in from_obj
    assert from_map['employment_status'] is None


def test_changed_fields_lists_differences():
    before = _record()
    after = _record(is_unemployed=True)
    assert changed_fields(before, after) == ['is_unemployed']
    assert changed_fields(after, after) == []
