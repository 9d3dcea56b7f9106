class PaymentError(Exception):
    pass


class PaymentConfigurationError(PaymentError):
    pass


class TransactionNotFound(PaymentError):
    def __init__(self, reference=None):
        self.reference = reference
        super().__init__("Transaction not found")


class PaystackError(PaymentError):
    pass
