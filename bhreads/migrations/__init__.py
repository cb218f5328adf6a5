# bhreads/migrations/__init__.py
"""
버전이 매겨진 일회성 데이터 마이그레이션

- 적용된 버전은 'schema_migrations' 컬렉션에 기록되며 다시 실행되지 않습니다.
- 각 마이그레이션 함수는 여러 번 실행해도 결과가 같아야 합니다.
- 요청 처리 코드와 분리되어 `flask migrate` 또는 서버 기동 직전에만 실행됩니다.
"""
import logging
from typing import Callable, List, NamedTuple

from bhreads.migrations.m0001_backfill_user_defaults import backfill_user_defaults
from bhreads.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


class Migration(NamedTuple):
    version: int
    description: str
    apply: Callable


MIGRATIONS: List[Migration] = [
    Migration(1, "backfill user profile defaults", backfill_user_defaults),
]


def applied_versions(db) -> set:
    return {int(doc.id) for doc in db.collection('schema_migrations').stream()}


def run_migrations(db, migrations: List[Migration] = None) -> List[int]:
    """아직 적용되지 않은 마이그레이션을 순서대로 실행하고, 실행한 버전 목록을 반환합니다."""
    migrations = sorted(migrations or MIGRATIONS, key=lambda m: m.version)
    done = applied_versions(db)
    executed = []
    for migration in migrations:
        if migration.version in done:
            continue
        logger.info(f"마이그레이션 실행: {migration.version} ({migration.description})")
        result = migration.apply(db)
        db.collection('schema_migrations').document(str(migration.version)).set({
            'version': migration.version,
            'description': migration.description,
            'applied_at': DateTimeUtils.now(),
            'result': result,
        })
        executed.append(migration.version)

    if not executed:
        logger.info("적용할 마이그레이션이 없습니다.")
    return executed
