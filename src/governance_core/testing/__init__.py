"""Testing support – fakes, generators and pytest fixtures.

Import in your ``conftest.py``::

    pytest_plugins = ["governance_core.testing.fixtures"]
"""

from governance_core.testing.fakes import RecordingHandler, UnavailableDocumentStore
from governance_core.testing.generators import StepClock

__all__ = ["RecordingHandler", "StepClock", "UnavailableDocumentStore"]
