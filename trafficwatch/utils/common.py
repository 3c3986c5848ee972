from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import pytz
from dateutil import parser
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from trafficwatch.utils.errors import ValidationError


def api_response(*, message: str, status: str,
                 data: Union[List[Any], Dict[str, Any], None] = None,
                 status_code: Optional[int] = 200) -> JSONResponse:
    response_data = {
        "message": message,
        "status": status,
        "data": data if data is not None else []
    }
    return JSONResponse(content=jsonable_encoder(response_data), status_code=status_code)


def dump_models(models: List[BaseModel]) -> List[Dict[str, Any]]:
    return [model.model_dump(mode="json") for model in models]


class DateTimeUtils:

    @staticmethod
    def parse_query_datetime(value: Optional[str], field: str) -> Optional[datetime]:
        """Parse a query-string date; naive values are taken as UTC."""
        if not value:
            return None
        try:
            parsed = parser.parse(value)
        except (ValueError, OverflowError):
            raise ValidationError(f"Invalid {field}: {value}", context={"field": field})
        if parsed.tzinfo is None:
            parsed = pytz.utc.localize(parsed)
        return parsed.astimezone(pytz.utc)
