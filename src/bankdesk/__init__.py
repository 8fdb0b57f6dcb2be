# Import main lazily to avoid circular dependencies
def __getattr__(name):
    if name == "main":
        from bankdesk.cli.main import main
        return main
    if name == "LedgerService":
        from bankdesk.domain.ledger import LedgerService
        return LedgerService
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
