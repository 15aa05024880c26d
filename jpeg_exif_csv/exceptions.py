"""
カスタム例外クラス定義

JPEG EXIF CSV Exporterで使用する例外クラスを定義します。
"""


class ProcessingError(Exception):
    """処理エラーの基底クラス"""
    pass


class FileOperationError(ProcessingError):
    """ファイル操作エラー（CSV出力の失敗など）"""
    pass


class ExifReadError(ProcessingError):
    """Exif読取エラー"""
    pass
