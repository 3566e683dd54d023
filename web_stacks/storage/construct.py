from constructs import Construct
from aws_cdk import aws_s3 as s3

from ..common.base import BaseComponent
from ..common.constants import MEDIA_BUCKET_SUFFIX
from ..common.naming import IdentityBuilder


class MediaStorage(BaseComponent):
    """Private bucket for media and static HTML/CSS/JS files, served through the CDN."""

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 identity: IdentityBuilder) -> None:
        super().__init__(scope, construct_id, identity)

        self.bucket = s3.Bucket(
            self,
            self.identity.build(MEDIA_BUCKET_SUFFIX),
            encryption=s3.BucketEncryption.S3_MANAGED,
            enforce_ssl=True,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL
        )
