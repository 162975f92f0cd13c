"""
Hypothesis profile for property tests.

The autouse isolated_home fixture is function-scoped; property tests never
touch the store, so sharing it across generated examples is harmless.
"""

from hypothesis import HealthCheck, settings

settings.register_profile(
    "moodspend", suppress_health_check=[HealthCheck.function_scoped_fixture]
)
settings.load_profile("moodspend")
