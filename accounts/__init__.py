# Accounts package - identity, sessions, membership and history
#
# Modules:
# - models: Account, history records, registration input, patches
# - credentials: Password verifier codecs (legacy, bcrypt)
# - repository: Durable account collection
# - session: Current authenticated account
# - membership: Premium entitlement rules
# - ledger: Purchase and consultation history
# - service: AccountService, the single writer of accounts
# - factory: Wiring from settings
