"""
Provider interfaces and implementations.

- base: AuthProvider, ObjectStorage and UsageSource abstract classes
- supabase_provider: Supabase-backed implementations
"""
