"""
core/registry/defaults.py - 레지스트리 기본 데이터

서비스 별칭, 표시 이름, 카테고리, 기본 리소스, 하위 리소스 목록을 정의합니다.

Attributes:
    DEFAULT_ALIASES: 별칭 -> "service" 또는 "service/resource"
    DEFAULT_DISPLAY_NAMES: 서비스 -> UI 표시 이름
    SERVICE_CATEGORIES: 서비스 목록 화면의 카테고리 (표시 순서 유지)
    DEFAULT_RESOURCES: 리소스 없이 서비스만 입력했을 때의 기본 리소스
    SUB_RESOURCES: 상위 리소스에서 이동해야만 접근 가능한 "service/resource"
"""

DEFAULT_ALIASES: dict[str, str] = {
    "cfn": "cloudformation",
    "cf": "cloudformation",
    "sg": "ec2/security-groups",
    "asg": "autoscaling",
    "cw": "cloudwatch",
    "logs": "cloudwatch/log-groups",
    "r53": "route53",
    "ssm": "ssm",
    "sm": "secretsmanager",
    "ddb": "dynamodb",
    "sqs": "sqs",
    "sns": "sns",
    "eb": "events",
    "eventbridge": "events",
    "sfn": "stepfunctions",
    "apigw": "apigateway",
    "api": "apigateway",
    "elb": "elbv2",
    "alb": "elbv2",
    "nlb": "elbv2",
    "redis": "elasticache",
    "cache": "elasticache",
    "es": "opensearch",
    "cdn": "cloudfront",
    "gd": "guardduty",
    "build": "codebuild",
    "pipeline": "codepipeline",
    "waf": "wafv2",
    "fn": "lambda",
    "func": "lambda",
    "bucket": "s3/buckets",
    "vm": "ec2/instances",
    "odcr": "ec2/capacity-reservations",
    "cognito": "cognito-idp",
    "config": "configservice",
}

DEFAULT_DISPLAY_NAMES: dict[str, str] = {
    "acm": "Certificate Manager",
    "apigateway": "API Gateway",
    "autoscaling": "Auto Scaling",
    "cloudformation": "CloudFormation",
    "cloudfront": "CloudFront",
    "cloudtrail": "CloudTrail",
    "cloudwatch": "CloudWatch",
    "codebuild": "CodeBuild",
    "codepipeline": "CodePipeline",
    "dynamodb": "DynamoDB",
    "ec2": "EC2",
    "ecr": "ECR",
    "ecs": "ECS",
    "elasticache": "ElastiCache",
    "elbv2": "Elastic Load Balancing",
    "events": "EventBridge",
    "iam": "IAM",
    "kms": "KMS",
    "lambda": "Lambda",
    "rds": "RDS",
    "route53": "Route 53",
    "s3": "S3",
    "secretsmanager": "Secrets Manager",
    "sns": "SNS",
    "sqs": "SQS",
    "ssm": "Systems Manager",
    "stepfunctions": "Step Functions",
    "tagging": "Tag Search",
    "vpc": "VPC",
}

# AWS 서비스 카테고리 (표시 순서)
SERVICE_CATEGORIES: list[dict] = [
    {
        "name": "Compute",
        "name_ko": "컴퓨팅",
        "services": ["ec2", "lambda", "ecs", "autoscaling", "batch"],
    },
    {
        "name": "Storage & Database",
        "name_ko": "스토리지 및 데이터베이스",
        "services": ["s3", "dynamodb", "rds", "elasticache", "opensearch"],
    },
    {
        "name": "Networking",
        "name_ko": "네트워킹",
        "services": ["vpc", "route53", "apigateway", "elbv2", "cloudfront"],
    },
    {
        "name": "Security & Identity",
        "name_ko": "보안 및 자격 증명",
        "services": ["iam", "kms", "acm", "secretsmanager", "ssm", "guardduty", "wafv2"],
    },
    {
        "name": "Integration",
        "name_ko": "애플리케이션 통합",
        "services": ["sqs", "sns", "events", "stepfunctions"],
    },
    {
        "name": "DevOps",
        "name_ko": "개발자 도구",
        "services": ["codebuild", "codepipeline", "cloudformation"],
    },
    {
        "name": "Monitoring",
        "name_ko": "모니터링",
        "services": ["cloudwatch", "cloudtrail"],
    },
]

DEFAULT_RESOURCES: dict[str, str] = {
    "ec2": "instances",
    "elbv2": "load-balancers",
    "cloudformation": "stacks",
    "cloudwatch": "log-groups",
    "lambda": "functions",
    "route53": "hosted-zones",
    "s3": "buckets",
    "tagging": "resources",
    "vpc": "vpcs",
}

SUB_RESOURCES: frozenset[str] = frozenset(
    {
        "cloudformation/events",
        "cloudformation/outputs",
        "cloudformation/resources",
        "cloudwatch/log-streams",
        "route53/record-sets",
        "apigateway/stages",
        "elbv2/targets",
        "ecr/images",
        "codebuild/builds",
        "codepipeline/executions",
        "stepfunctions/executions",
        "autoscaling/activities",
    }
)
