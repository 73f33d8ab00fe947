"""Reference values for resident records and sectoral classification."""

# ============================================
# RESIDENT ENUMS
# ============================================

SEX_CHOICES = ('male', 'female')

EDUCATION_LEVELS = (
    'none',
    'elementary',
    'high_school',
    'college',
    'post_graduate',
    'vocational',
)

# Levels with a completion status that matters for OSY (post-secondary)
POST_SECONDARY_LEVELS = frozenset({'college', 'post_graduate', 'vocational'})
BASIC_EDUCATION_LEVELS = frozenset({'elementary', 'high_school'})

EDUCATION_STATUS_GRADUATE = 'graduate'
EDUCATION_STATUS_UNDER_GRADUATE = 'under_graduate'
EDUCATION_STATUSES = (EDUCATION_STATUS_GRADUATE, EDUCATION_STATUS_UNDER_GRADUATE)

EMPLOYMENT_STATUSES = (
    'employed',
    'self_employed',
    'unemployed',
    'looking_for_work',
    'student',
    'retired',
    'homemaker',
    'unable_to_work',
    'not_in_labor_force',
    'underemployed',
)

EMPLOYED_STATUSES = frozenset({'employed', 'self_employed'})
UNEMPLOYED_STATUSES = frozenset({'unemployed', 'looking_for_work'})

# Indigenous cultural communities / ethnic minority groups recognized for
# IP sectoral reporting. Values match the ethnicity codes stored on residents.
INDIGENOUS_ETHNICITIES = frozenset({
    'indigenous_group',
    'aeta',
    'agta',
    'ati',
    'badjao',
    'batak',
    'bukidnon',
    'gaddang',
    'higaonon',
    'ibaloi',
    'ibanag',
    'ifugao',
    'igorot',
    'ilongot',
    'isneg',
    'ivatan',
    'kalinga',
    'kankanaey',
    'maguindanao',
    'mamanwa',
    'mangyan',
    'mansaka',
    'maranao',
    'palawan',
    'sama',
    'samal',
    'subanen',
    'tausug',
    'tboli',
    'teduray',
    'tumandok',
    'yakan',
})

# ============================================
# SECTORAL CLASSIFICATION
# ============================================

OSC_AGE_RANGE = (6, 14)
OSY_AGE_RANGE = (15, 24)
SENIOR_CITIZEN_AGE = 60
MAX_PLAUSIBLE_AGE = 150

# Always re-derived from resident attributes
AUTO_SECTORAL_FIELDS = (
    'is_out_of_school_children',
    'is_out_of_school_youth',
    'is_senior_citizen',
    'is_labor_force_employed',
    'is_unemployed',
    'is_indigenous_people',
)

# Operator-maintained; preserved on recompute
MANUAL_SECTORAL_FIELDS = (
    'is_registered_senior_citizen',
    'is_person_with_disability',
    'is_overseas_filipino_worker',
    'is_solo_parent',
    'is_migrant',
)

SECTORAL_FIELDS = AUTO_SECTORAL_FIELDS + MANUAL_SECTORAL_FIELDS

# Fields the synchronizer may change (auto fields + the registered-senior reset)
SYNCHRONIZED_FIELDS = AUTO_SECTORAL_FIELDS + ('is_registered_senior_citizen',)

# Resident columns whose change triggers a sectoral recompute
SECTORAL_SOURCE_ATTRIBUTES = (
    'birthdate',
    'education_attainment',
    'education_status',
    'employment_status',
    'ethnicity',
)

# ============================================
# ROLES
# ============================================

STAFF_ROLES = ('barangay_admin', 'municipal_admin', 'superadmin')
SUPERADMIN_ROLE = 'superadmin'
