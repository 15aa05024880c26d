# JPEG EXIF CSV Exporter
# A Python tool to extract EXIF metadata from JPEG files into a CSV file

from .models import ExifRecord, RunResult, ExportStats, ExportConfig
from .exceptions import ProcessingError, FileOperationError, ExifReadError
from .file_scanner import FileScanner
from .exif_reader import ExifReader
from .csv_reporter import CsvReporter, OUTPUT_FILENAME
from .logger import ProgressLogger, LogConfig, create_default_logger, get_default_log_file
from .exporter import ExifExporter

__all__ = [
    'ExifRecord',
    'RunResult',
    'ExportStats',
    'ExportConfig',
    'ProcessingError',
    'FileOperationError',
    'ExifReadError',
    'FileScanner',
    'ExifReader',
    'CsvReporter',
    'OUTPUT_FILENAME',
    'ProgressLogger',
    'LogConfig',
    'create_default_logger',
    'get_default_log_file',
    'ExifExporter'
]
