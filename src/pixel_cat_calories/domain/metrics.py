"""Body metrics and calorie targets."""

from collections.abc import Iterable

from pixel_cat_calories.domain.models import BmiCategory, Gender, Goal, Profile

SLIM_UPPER_BMI = 18.5
NORMAL_UPPER_BMI = 25.0
FAT_UPPER_BMI = 30.0

SEDENTARY_ACTIVITY_FACTOR = 1.2
CALORIE_ADJUSTMENT = 500
MIN_CUTTING_CALORIES = 1200


def compute_bmi(weight_kg: float, height_cm: float) -> float:
    """Return BMI rounded to two decimals; 0 when height is unset."""
    if height_cm == 0:
        return 0.0
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 2)


def categorize_bmi(bmi: float) -> BmiCategory:
    """Map a BMI onto slim [0, 18.5), normal [18.5, 25), fat [25, 30), obese."""
    if bmi < SLIM_UPPER_BMI:
        return BmiCategory.SLIM
    if bmi < NORMAL_UPPER_BMI:
        return BmiCategory.NORMAL
    if bmi < FAT_UPPER_BMI:
        return BmiCategory.FAT
    return BmiCategory.OBESE


def profile_bmi_category(profile: Profile) -> BmiCategory | None:
    """Return the category for a profile, or None while BMI is not computed."""
    if profile.bmi <= 0:
        return None
    return categorize_bmi(profile.bmi)


def compute_daily_calorie_target(
    gender: Gender | str,
    age: int,
    height_cm: float,
    weight_kg: float,
    goals: Iterable[str],
) -> float:
    """Mifflin-St Jeor TDEE adjusted by the highest-priority goal."""
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    bmr += 5 if gender == Gender.MALE else -161
    tdee = bmr * SEDENTARY_ACTIVITY_FACTOR

    goal_set = set(goals)
    if Goal.BE_SLIMMER in goal_set:
        return max(float(MIN_CUTTING_CALORIES), tdee - CALORIE_ADJUSTMENT)
    if Goal.BE_FATTER in goal_set:
        return tdee + CALORIE_ADJUSTMENT
    # "increase protein" and "maintain weight" keep the baseline.
    return tdee
