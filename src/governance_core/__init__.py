"""
governance_core – event-driven consistency core for workspace governance.

Import path convention::

    from governance_core.kernel.errors import DomainError
    from governance_core.kernel.events import EventType, SkillXpAdded
    from governance_core.application.events import EventBus
    from governance_core.application.bootstrap import GovernanceScope
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
