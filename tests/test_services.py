import io
import unittest
from datetime import datetime

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError, EndpointConnectionError

from s3_file_manager.profiles import ConnectionProfile
from s3_file_manager.services import S3ObjectStore, StoreUnavailable, describe_error


class FakeS3Client:
    def __init__(self, list_responses=None, errors=None, presigned_url="signed-url"):
        self.list_responses = iter(list_responses or [])
        self.errors = errors or {}
        self.presigned_url = presigned_url
        self.list_objects_kwargs = []
        self.put_object_calls = []
        self.upload_fileobj_calls = []
        self.copy_object_calls = []
        self.delete_object_calls = []
        self.presigned_url_calls = []

    def _maybe_raise(self, operation):
        error = self.errors.get(operation)
        if isinstance(error, Exception):
            raise error

    def list_objects_v2(self, **kwargs):
        self.list_objects_kwargs.append(kwargs)
        self._maybe_raise("list_objects_v2")
        return next(self.list_responses)

    def put_object(self, **kwargs):
        self.put_object_calls.append(kwargs)
        self._maybe_raise("put_object")

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None):
        self.upload_fileobj_calls.append({"body": fileobj.read(), "bucket": bucket, "key": key, "extra_args": ExtraArgs})
        self._maybe_raise("upload_fileobj")

    def copy_object(self, **kwargs):
        self.copy_object_calls.append(kwargs)
        self._maybe_raise("copy_object")

    def delete_object(self, **kwargs):
        self.delete_object_calls.append(kwargs)
        self._maybe_raise("delete_object")

    def generate_presigned_url(self, client_method, Params=None, ExpiresIn=3600):
        self.presigned_url_calls.append(
            {"method": client_method, "params": Params or {}, "expires_in": ExpiresIn}
        )
        self._maybe_raise("generate_presigned_url")
        return self.presigned_url


def access_denied(operation="ListObjectsV2"):
    return ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, operation)


class S3ObjectStoreTests(unittest.TestCase):
    def setUp(self):
        self.profile = ConnectionProfile(
            name="default",
            endpoint_url="https://minio.example.com",
            access_key="access",
            secret_key="secret",
            region="us-east-1",
        )

    def make_store(self, fake_client):
        self.factory_calls = []

        def factory(*args, **kwargs):
            self.factory_calls.append((args, kwargs))
            return fake_client

        return S3ObjectStore(self.profile, client_factory=factory)

    def test_creates_client_once_with_profile_credentials(self):
        fake_client = FakeS3Client()
        store = self.make_store(fake_client)

        store.delete_object(bucket_name="bucket", key="a.txt")
        store.delete_object(bucket_name="bucket", key="b.txt")

        self.assertEqual(1, len(self.factory_calls))
        args, kwargs = self.factory_calls[0]
        self.assertEqual(("s3",), args)
        self.assertEqual("https://minio.example.com", kwargs["endpoint_url"])
        self.assertEqual("access", kwargs["aws_access_key_id"])
        self.assertEqual("secret", kwargs["aws_secret_access_key"])
        self.assertEqual("us-east-1", kwargs["region_name"])

    def test_list_page_maps_contents_and_common_prefixes(self):
        last_modified = datetime(2024, 1, 1, 12, 0, 0)
        fake_client = FakeS3Client(
            [
                {
                    "Contents": [{"Key": "docs/a.txt", "Size": 10, "LastModified": last_modified}],
                    "CommonPrefixes": [{"Prefix": "docs/sub/"}],
                    "IsTruncated": False,
                }
            ]
        )
        store = self.make_store(fake_client)

        page = store.list_page(bucket_name="bucket", prefix="docs/")

        self.assertEqual(["docs/a.txt"], [entry.key for entry in page.files])
        self.assertEqual(10, page.files[0].size)
        self.assertEqual(last_modified, page.files[0].last_modified)
        self.assertEqual(["docs/sub/"], page.prefixes)
        self.assertIsNone(page.continuation_token)
        self.assertEqual(
            {"Bucket": "bucket", "MaxKeys": 1000, "Prefix": "docs/", "Delimiter": "/"},
            fake_client.list_objects_kwargs[0],
        )

    def test_list_page_omits_empty_prefix_and_delimiter(self):
        fake_client = FakeS3Client([{"Contents": []}])
        store = self.make_store(fake_client)

        store.list_page(bucket_name="bucket", prefix="", delimiter=None)

        self.assertEqual({"Bucket": "bucket", "MaxKeys": 1000}, fake_client.list_objects_kwargs[0])

    def test_iter_pages_follows_continuation_tokens(self):
        fake_client = FakeS3Client(
            [
                {"Contents": [{"Key": "a.txt"}], "IsTruncated": True, "NextContinuationToken": "token-1"},
                {"CommonPrefixes": [{"Prefix": "b/"}], "IsTruncated": True, "NextContinuationToken": "token-2"},
                {"Contents": [{"Key": "c.txt"}], "IsTruncated": False},
            ]
        )
        store = self.make_store(fake_client)

        pages = list(store.iter_pages(bucket_name="bucket"))

        self.assertEqual(3, len(pages))
        self.assertEqual(["a.txt"], [entry.key for entry in pages[0].files])
        self.assertEqual(["b/"], pages[1].prefixes)
        self.assertEqual(["c.txt"], [entry.key for entry in pages[2].files])
        self.assertEqual(
            [None, "token-1", "token-2"],
            [kwargs.get("ContinuationToken") for kwargs in fake_client.list_objects_kwargs],
        )

    def test_list_errors_become_store_unavailable(self):
        fake_client = FakeS3Client(errors={"list_objects_v2": access_denied()})
        store = self.make_store(fake_client)

        with self.assertRaises(StoreUnavailable) as ctx:
            list(store.iter_pages(bucket_name="bucket", prefix="docs/"))

        self.assertEqual("Access Denied", str(ctx.exception))
        self.assertIsInstance(ctx.exception.__cause__, ClientError)

    def test_put_object_passes_body_and_content_type(self):
        fake_client = FakeS3Client()
        store = self.make_store(fake_client)

        store.put_object(bucket_name="bucket", key="docs/a.txt", body=b"hello", content_type="text/plain")
        store.put_object(bucket_name="bucket", key="docs/sub/")

        self.assertEqual(
            {"Bucket": "bucket", "Key": "docs/a.txt", "Body": b"hello", "ContentType": "text/plain"},
            fake_client.put_object_calls[0],
        )
        self.assertEqual({"Bucket": "bucket", "Key": "docs/sub/", "Body": b""}, fake_client.put_object_calls[1])

    def test_upload_fileobj_streams_through_managed_transfer(self):
        fake_client = FakeS3Client()
        store = self.make_store(fake_client)

        store.upload_fileobj(
            bucket_name="bucket", key="docs/big.bin", fileobj=io.BytesIO(b"payload"), content_type="application/zip"
        )
        store.upload_fileobj(bucket_name="bucket", key="docs/plain", fileobj=io.BytesIO(b""))

        self.assertEqual(
            {"body": b"payload", "bucket": "bucket", "key": "docs/big.bin", "extra_args": {"ContentType": "application/zip"}},
            fake_client.upload_fileobj_calls[0],
        )
        self.assertIsNone(fake_client.upload_fileobj_calls[1]["extra_args"])

    def test_upload_failures_become_store_unavailable(self):
        fake_client = FakeS3Client(
            errors={"upload_fileobj": S3UploadFailedError("Failed to upload docs/big.bin: Access Denied")}
        )
        store = self.make_store(fake_client)

        with self.assertRaises(StoreUnavailable) as ctx:
            store.upload_fileobj(bucket_name="bucket", key="docs/big.bin", fileobj=io.BytesIO(b"x"))

        self.assertIn("Access Denied", str(ctx.exception))

    def test_copy_object_uses_same_bucket_as_source(self):
        fake_client = FakeS3Client()
        store = self.make_store(fake_client)

        store.copy_object(bucket_name="bucket", source_key="docs/a.txt", destination_key="a.txt")

        self.assertEqual(
            {
                "Bucket": "bucket",
                "Key": "a.txt",
                "CopySource": {"Bucket": "bucket", "Key": "docs/a.txt"},
            },
            fake_client.copy_object_calls[0],
        )

    def test_copy_and_delete_errors_become_store_unavailable(self):
        fake_client = FakeS3Client(
            errors={
                "copy_object": access_denied("CopyObject"),
                "delete_object": EndpointConnectionError(endpoint_url="https://minio.example.com"),
            }
        )
        store = self.make_store(fake_client)

        with self.assertRaises(StoreUnavailable):
            store.copy_object(bucket_name="bucket", source_key="a", destination_key="b")
        with self.assertRaises(StoreUnavailable) as ctx:
            store.delete_object(bucket_name="bucket", key="a")

        self.assertIn("minio.example.com", str(ctx.exception))

    def test_generate_presigned_url_defaults_to_fifteen_minutes(self):
        fake_client = FakeS3Client(presigned_url="https://signed")
        store = self.make_store(fake_client)

        url = store.generate_presigned_url(bucket_name="bucket", key="docs/a.txt")

        self.assertEqual("https://signed", url)
        self.assertEqual(
            {
                "method": "get_object",
                "params": {"Bucket": "bucket", "Key": "docs/a.txt"},
                "expires_in": 900,
            },
            fake_client.presigned_url_calls[0],
        )

    def test_generate_presigned_url_rejects_non_positive_expiry(self):
        store = self.make_store(FakeS3Client())

        with self.assertRaises(ValueError):
            store.generate_presigned_url(bucket_name="bucket", key="a.txt", expires_in=0)

    def test_describe_error_falls_back_to_code_and_str(self):
        no_message = ClientError({"Error": {"Code": "NoSuchBucket"}}, "ListObjectsV2")

        self.assertEqual("NoSuchBucket", describe_error(no_message))
        self.assertEqual("boom", describe_error(RuntimeError("boom")))


if __name__ == "__main__":
    unittest.main()
