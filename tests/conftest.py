pytest_plugins = ["governance_core.testing.fixtures"]
