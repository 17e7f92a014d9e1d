import os

from hypothesis import HealthCheck, settings


# buffers are built with struct and sliced a lot, keep the
# default example count but never fail on slow generation
settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.too_slow])

if "CI" in os.environ:
    # CI can be slow, so be patient
    # Also we can run more tests there
    settings.register_profile(
        "ci",
        parent=settings.get_profile("default"),
        deadline=None,
        max_examples=settings.default.max_examples * 5)
    settings.load_profile("ci")
else:
    settings.load_profile("default")
