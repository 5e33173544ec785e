"""
                        Services Module

Business logic, one class per component, each constructed around an
AsyncSession:
    - auth: Authenticator (accounts and session tokens)
    - policy: role checks and city visibility (pure functions)
    - menu: MenuCatalog
    - orders: OrderLedger and the status transition table
    - notifications: NotificationFeed
    - addresses: AddressBook
"""
