from governance_core.kernel.time.clock import Clock, SystemClock, isoformat, utc_now

__all__ = ["Clock", "SystemClock", "isoformat", "utc_now"]
