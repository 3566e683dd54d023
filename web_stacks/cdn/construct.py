"""
CloudFront distribution in front of the shared load balancer and the media bucket.
"""

from typing import List, Optional
from constructs import Construct
from aws_cdk import (
    aws_certificatemanager as acm,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as cloudfront_origins,
    aws_elasticloadbalancingv2 as elbv2,
    aws_s3 as s3,
)

from ..common.base import BaseComponent
from ..common.constants import (
    CDN_SUFFIX,
    DEFAULT_CLOUDFRONT_PRICE_CLASS,
    DEFAULT_MEDIA_PATH_PATTERN,
)
from ..common.exceptions import ValidationError
from ..common.naming import IdentityBuilder
from ..common.validators import AWSResourceValidator


class ContentDelivery(BaseComponent):
    """
    Distribution with two origins.

    The default behaviour forwards everything, uncached, to the load
    balancer. The media path is served from the bucket through an origin
    access control with optimized caching.
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 identity: IdentityBuilder,
                 load_balancer: elbv2.IApplicationLoadBalancer,
                 media_bucket: s3.IBucket,
                 media_path_pattern: str = DEFAULT_MEDIA_PATH_PATTERN,
                 price_class: str = DEFAULT_CLOUDFRONT_PRICE_CLASS,
                 certificate_arn: Optional[str] = None,
                 domain_names: Optional[List[str]] = None) -> None:
        super().__init__(scope, construct_id, identity)

        self.price_class = price_class
        self.domain_names = list(domain_names or [])

        certificate = None
        if certificate_arn:
            AWSResourceValidator.validate_arn(certificate_arn, "acm")
            if not self.domain_names:
                raise ValidationError(
                    "A CDN certificate requires at least one domain name",
                    parameter_name="domain_names",
                    provided_value="[]"
                )
            certificate = acm.Certificate.from_certificate_arn(
                self,
                self.identity.build("certificate"),
                certificate_arn
            )

        self.distribution = cloudfront.Distribution(
            self,
            self.identity.build(CDN_SUFFIX),
            certificate=certificate,
            domain_names=self.domain_names or None,
            default_behavior=cloudfront.BehaviorOptions(
                origin=cloudfront_origins.LoadBalancerV2Origin(load_balancer),
                allowed_methods=cloudfront.AllowedMethods.ALLOW_ALL,
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                cache_policy=cloudfront.CachePolicy.CACHING_DISABLED,
                response_headers_policy=cloudfront.ResponseHeadersPolicy.CORS_ALLOW_ALL_ORIGINS_WITH_PREFLIGHT_AND_SECURITY_HEADERS,
                origin_request_policy=cloudfront.OriginRequestPolicy.ALL_VIEWER,
                compress=True
            ),
            additional_behaviors={
                media_path_pattern: cloudfront.BehaviorOptions(
                    origin=cloudfront_origins.S3BucketOrigin.with_origin_access_control(media_bucket),
                    allowed_methods=cloudfront.AllowedMethods.ALLOW_GET_HEAD,
                    viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                    cache_policy=cloudfront.CachePolicy.CACHING_OPTIMIZED,
                    response_headers_policy=cloudfront.ResponseHeadersPolicy.CORS_ALLOW_ALL_ORIGINS_AND_SECURITY_HEADERS,
                    origin_request_policy=cloudfront.OriginRequestPolicy.CORS_S3_ORIGIN,
                    compress=True
                )
            },
            price_class=self._get_cloudfront_price_class()
        )

    def _get_cloudfront_price_class(self) -> cloudfront.PriceClass:
        """
        Convert the configured price class string to the CDK enum.

        Raises:
            ValidationError: If the price class is unknown
        """
        price_class_map = {
            "PriceClass_All": cloudfront.PriceClass.PRICE_CLASS_ALL,
            "PriceClass_200": cloudfront.PriceClass.PRICE_CLASS_200,
            "PriceClass_100": cloudfront.PriceClass.PRICE_CLASS_100
        }

        if self.price_class not in price_class_map:
            raise ValidationError(
                f"Unknown CloudFront price class: {self.price_class}",
                parameter_name="price_class",
                provided_value=str(self.price_class)
            )
        return price_class_map[self.price_class]
