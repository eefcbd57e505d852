# snapconnect/services/storage_service.py
import uuid
import logging
from datetime import timedelta
from urllib.parse import unquote, urlparse
from flask import Flask
from firebase_admin import storage

class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 서비스 클래스입니다.
    스냅 이미지 업로드용 Pre-signed URL 발급, 공개 URL 발급, 삭제를 제공합니다.
    """

    # 업로드 목적 -> 저장 폴더
    PATH_MAP = {
        "snap_image": "snaps/{user_id}",
        "profile_image": "profile_images/{user_id}",
    }

    def __init__(self):
        """실제 버킷 객체는 init_app 메서드를 통해 주입됩니다."""
        self.bucket = None

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 Storage 버킷을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    def _require_bucket(self):
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")
        return self.bucket

    def generate_upload_url(self, user_id: str, upload_type: str, filename: str, content_type: str) -> dict:
        """
        클라이언트가 서버를 거치지 않고 직접 PUT 업로드할 수 있는 Pre-signed URL을 생성합니다.

        :param user_id: 현재 로그인된 사용자 ID
        :param upload_type: 업로드 목적 ("snap_image", "profile_image")
        :param filename: 원본 파일명 (확장자 파악에 사용)
        :param content_type: 업로드할 파일의 MIME 타입 (예: "image/jpeg")
        :return: 업로드 URL과 스냅 생성 시 넘겨줄 파일 경로
        """
        bucket = self._require_bucket()

        folder_template = self.PATH_MAP.get(upload_type)
        if not folder_template:
            raise ValueError(f"'{upload_type}'은(는) 유효한 업로드 타입이 아닙니다.")

        extension = filename.rsplit('.', 1)[-1] if '.' in filename else 'jpg'
        destination_blob_name = f"{folder_template.format(user_id=user_id)}/{uuid.uuid4()}.{extension}"

        blob = bucket.blob(destination_blob_name)
        upload_url = blob.generate_signed_url(
            version="v4",
            expiration=timedelta(minutes=15),
            method="PUT",
            content_type=content_type
        )

        return {
            "upload_url": upload_url,
            "file_path": destination_blob_name
        }

    def publish(self, file_path: str) -> str:
        """
        업로드된 파일을 공개로 전환하고 공개 URL을 반환합니다.

        :raises FileNotFoundError: 업로드가 끝나지 않았거나 경로가 잘못된 경우
        """
        bucket = self._require_bucket()
        blob = bucket.blob(file_path)

        if not blob.exists():
            raise FileNotFoundError(f"파일을 찾을 수 없습니다: {file_path}")

        blob.make_public()
        return blob.public_url

    @staticmethod
    def blob_path_from_url(url: str) -> str:
        """공개 URL(https://storage.googleapis.com/<bucket>/<path>)에서 blob 경로를 추출합니다."""
        path = unquote(urlparse(url).path).lstrip('/')
        # 첫 세그먼트는 버킷 이름
        return path.split('/', 1)[1] if '/' in path else path

    def delete_by_url(self, url: str) -> bool:
        """공개 URL로 저장된 이미지를 삭제합니다. 로컬(데모) 경로는 무시합니다."""
        if not url or not url.startswith('http'):
            return False
        bucket = self._require_bucket()
        try:
            blob = bucket.blob(self.blob_path_from_url(url))
            if blob.exists():
                blob.delete()
                return True
        except Exception as e:
            logging.error(f"Storage 이미지 삭제 실패 (url: {url}): {e}")
        return False
