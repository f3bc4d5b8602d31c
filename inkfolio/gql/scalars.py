from datetime import datetime

from ariadne import ScalarType

from inkfolio.models import isoformat

datetime_scalar = ScalarType('DateTime')
file_upload_scalar = ScalarType('FileUpload')


@datetime_scalar.serializer
def serialize_datetime(value):
    return isoformat(value)


@datetime_scalar.value_parser
def parse_datetime_value(value):
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


@file_upload_scalar.serializer
def serialize_file_upload(value):
    raise ValueError('FileUpload is an input-only scalar')


@file_upload_scalar.value_parser
def parse_file_upload_value(value):
    # Already a werkzeug FileStorage, put in place by the multipart combiner
    return value
