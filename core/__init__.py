# Core package - foundational components
#
# Modules:
# - config: Application settings
# - logging: Structured logging
# - errors: Account error hierarchy
# - timeutils: Timezone-aware clock helpers
# - storage: Pluggable key-value stores (memory, file, MongoDB, PostgreSQL)
