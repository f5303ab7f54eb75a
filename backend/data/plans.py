# Subscription plans and their monthly analysis quota (None = unlimited)
PLANS = {
    "FREE": {
        "name": "Free",
        "price": "$0",
        "period": "month",
        "ai_calls_limit": 5,
        "description": "Perfect for trying out the platform",
    },
    "BASIC": {
        "name": "Basic",
        "price": "$9",
        "period": "month",
        "ai_calls_limit": 50,
        "description": "For small teams and individual developers",
    },
    "PRO": {
        "name": "Pro",
        "price": "$29",
        "period": "month",
        "ai_calls_limit": 200,
        "description": "For growing teams and agencies",
    },
    "ENTERPRISE": {
        "name": "Enterprise",
        "price": "Custom",
        "period": "",
        "ai_calls_limit": None,
        "description": "For large organizations",
    },
}
