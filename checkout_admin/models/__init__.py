from checkout_admin.models.checkout import (  # noqa: F401
    AddonPlan,
    AdminUser,
    BillingAddress,
    Country,
    PaymentComment,
    PaymentLog,
    PaymentTerm,
    Plan,
    Pricing,
    Product,
    Subscription,
    WorkType,
)
