from services.mock.brd import mock_brd_analysis

__all__ = [
    "mock_brd_analysis",
]
