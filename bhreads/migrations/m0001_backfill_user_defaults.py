# bhreads/migrations/m0001_backfill_user_defaults.py
import logging
from typing import Dict

from bhreads.models.user import missing_profile_defaults

logger = logging.getLogger(__name__)


def backfill_user_defaults(db) -> Dict[str, int]:
    """
    role / avatar / bio / favorite_item / last_active 가 없는 예전 사용자 문서를 채웁니다.
    사용자별 실패는 로그만 남기고 계속 진행합니다.
    """
    users_ref = db.collection('users')
    updated = failed = 0
    for doc in users_ref.stream():
        user_data = doc.to_dict()
        updates = missing_profile_defaults(user_data)
        if not updates:
            continue
        try:
            users_ref.document(doc.id).update(updates)
            updated += 1
            logger.info(f"사용자 기본값 보정 완료: {user_data.get('username')}")
        except Exception as e:
            failed += 1
            logger.warning(f"사용자 기본값 보정 실패 (user_id: {doc.id}): {e}")

    logger.info(f"사용자 기본값 보정: 갱신 {updated}건, 실패 {failed}건")
    return {"updated": updated, "failed": failed}
