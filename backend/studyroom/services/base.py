# backend/studyroom/services/base.py
"""
Base class for study room services.

Services own the unit of work: repositories flush, services commit. The
transaction helper also translates storage failures into domain errors so
routes only ever see DomainException subclasses.
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Iterator, TypeVar, cast

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from studyroom.core.exceptions import RepositoryException, ServiceException, StorageUnavailableException
from studyroom.monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    # service class name -> operation -> counters
    _class_metrics: Dict[str, Dict[str, Dict[str, float]]] = {}

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Commit on success, roll back on any exception.

        Raises:
            StorageUnavailableException: the database could not be reached
            ServiceException: any other SQLAlchemy failure
        """
        try:
            yield self.db
            self.db.commit()
        except (OperationalError, RepositoryException) as e:
            self.logger.error(f"Storage unavailable, rolling back: {e}")
            self.db.rollback()
            raise StorageUnavailableException() from e
        except SQLAlchemyError as e:
            self.logger.error(f"Database error, rolling back: {e}")
            self.db.rollback()
            raise ServiceException(f"Database operation failed: {e}") from e
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """Time the wrapped method, count outcomes and warn when it is slow."""

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                started = time.perf_counter()
                error_type = None
                try:
                    return func(self, *args, **kwargs)
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.perf_counter() - started
                    success = error_type is None
                    self._record_metric(operation_name, elapsed, success)
                    if elapsed > SLOW_OPERATION_SECONDS:
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )
                    prometheus_metrics.record_service_operation(
                        service=self.__class__.__name__,
                        operation=operation_name,
                        duration=elapsed,
                        status="success" if success else "error",
                        error_type=error_type,
                    )

            return cast(F, wrapper)

        return decorator

    def _record_metric(self, operation: str, elapsed: float, success: bool) -> None:
        counters = BaseService._class_metrics.setdefault(self.__class__.__name__, {}).setdefault(
            operation, {"count": 0, "total_time": 0.0, "failures": 0}
        )
        counters["count"] += 1
        counters["total_time"] += elapsed
        if not success:
            counters["failures"] += 1

    def get_metrics(self) -> Dict[str, Dict[str, float]]:
        """Per-operation count, mean duration and success rate for this service class."""
        result = {}
        for operation, counters in BaseService._class_metrics.get(
            self.__class__.__name__, {}
        ).items():
            count = counters["count"]
            if count:
                result[operation] = {
                    "count": count,
                    "avg_time": counters["total_time"] / count,
                    "success_rate": (count - counters["failures"]) / count,
                }
        return result
