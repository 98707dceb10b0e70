"""
Response producers sitting behind the cache.
"""

from typing import Any, Dict

from shared.logging import get_logger


DATA_MESSAGE = "Hello, this data is from the database!"


class DataSource:
    """Stands in for the database query behind ``/api/data``.

    ``invocations`` counts how often the producer actually ran, which is
    what a cache hit saves.
    """

    def __init__(self, message: str = DATA_MESSAGE):
        self.message = message
        self.invocations = 0
        self.logger = get_logger("cache.producers")

    async def fetch_data(self) -> Dict[str, Any]:
        self.invocations += 1
        self.logger.info("Fetching data from database", invocations=self.invocations)
        return {"message": self.message}
