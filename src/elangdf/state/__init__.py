"""State layer.

Stateful units the presentation layer observes: polling stores for
time-varying telemetry, the fallback location store and the optimistic
settings store. Every store is an explicitly constructed object; nothing
here is a module-level singleton.
"""
