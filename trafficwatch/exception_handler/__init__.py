from trafficwatch.exception_handler.exception_handler import (custom_exception_handler,
                                                             trafficwatch_exception_handler)
