# snapconnect/services/snap_stream.py
import logging
from typing import Callable, List, Optional, Tuple

from firebase_admin import firestore

from snapconnect.models.snap import Snap

SnapSnapshot = Tuple[Snap, ...]


class SnapStream:
    """
    'snaps' 컬렉션을 on_snapshot으로 구독하고 최신 스냅샷을 보관하는 서비스.

    Firestore는 변경이 생길 때마다 전체 결과 집합을 전달합니다. 전달받은 문서는 매번
    Snap.from_document로 변환해 새 튜플로 교체하고, 등록된 리스너를 도착 순서대로 호출합니다.
    보관 중인 튜플 자체는 수정하지 않습니다.
    """

    def __init__(self, snaps_ref=None):
        self.snaps_ref = snaps_ref if snaps_ref is not None else firestore.client().collection('snaps')
        self._snapshot: Optional[SnapSnapshot] = None
        self._listeners: List[Callable[[SnapSnapshot], None]] = []
        self._watch = None

    @property
    def is_running(self) -> bool:
        return self._watch is not None

    def start(self):
        """구독을 시작합니다. 이미 구독 중이면 아무것도 하지 않습니다."""
        if self._watch is not None:
            return
        self._watch = self.snaps_ref.on_snapshot(self._on_snapshot)
        logging.info("SnapStream: 'snaps' 컬렉션 실시간 구독을 시작했습니다.")

    def stop(self):
        if self._watch is None:
            return
        self._watch.unsubscribe()
        self._watch = None
        logging.info("SnapStream: 실시간 구독을 종료했습니다.")

    def add_listener(self, listener: Callable[[SnapSnapshot], None]):
        """새 스냅샷이 도착할 때마다 호출될 함수를 등록합니다."""
        self._listeners.append(listener)

    def current(self) -> Optional[SnapSnapshot]:
        """가장 최근 스냅샷. 아직 한 번도 받지 못했으면 None."""
        return self._snapshot

    def _on_snapshot(self, docs, changes, read_time):
        snapshot = tuple(Snap.from_document(doc.id, doc.to_dict()) for doc in docs)
        self._snapshot = snapshot
        logging.debug(f"SnapStream: 스냅샷 갱신 ({len(snapshot)}개, read_time: {read_time})")

        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logging.error(f"SnapStream 리스너 실행 중 오류 발생: {e}", exc_info=True)
