"""Root pytest configuration."""

pytest_plugins = ["sqla_timeline.testing"]
