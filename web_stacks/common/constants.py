"""
Constants used across CDK stacks.
"""

# Naming
ID_SEPARATOR = "-"
MAX_LOAD_BALANCER_NAME_LENGTH = 32  # ALB and target group names

# Service Configuration
DEFAULT_CPU = 256
DEFAULT_MEMORY = 512
DEFAULT_DESIRED_COUNT = 1

# Autoscaling
DEFAULT_CPU_TARGET_PERCENT = 50
DEFAULT_SCALING_COOLDOWN_SECONDS = 300

# Port Configuration
HTTP_PORT = 80
HTTPS_PORT = 443
TARGET_GROUP_PORT = 80

# Shared ingress
NOT_IMPLEMENTED_STATUS_CODE = 501
DEFAULT_DEREGISTRATION_DELAY = 60  # seconds
MAX_LISTENER_RULE_PRIORITY = 50000

# Image repositories
MAX_IMAGE_COUNT = 2

# Logging
DEFAULT_LOG_RETENTION_DAYS = 30

# VPC Configuration
DEFAULT_VPC_CIDR = "10.10.0.0/16"
DEFAULT_MAX_AZS = 2
DEFAULT_NAT_GATEWAYS = 1

# Database Configuration (Aurora Serverless v2 capacity units)
DEFAULT_DB_MIN_CAPACITY = 0.5
DEFAULT_DB_MAX_CAPACITY = 2

# CloudFront Configuration
DEFAULT_CLOUDFRONT_PRICE_CLASS = "PriceClass_100"
DEFAULT_MEDIA_PATH_PATTERN = "/media/*"

# Resource suffixes passed to IdentityBuilder.build()
VPC_SUFFIX = "vpc"
MEDIA_BUCKET_SUFFIX = "media"
DATABASE_SUFFIX = "db"
SECRETS_SUFFIX = "secrets"
TOPOLOGY_SUFFIX = "ecsBuilder"
CDN_SUFFIX = "cdn"
