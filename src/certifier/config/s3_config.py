import boto3
import os
import logging
from dotenv import load_dotenv
from botocore.exceptions import NoCredentialsError, ClientError
from botocore.client import Config

# Configure logging
logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

# AWS S3 Configuration
AWS_ACCESS_KEY_ID = os.getenv('AWS_ACCESS_KEY_ID')
AWS_SECRET_ACCESS_KEY = os.getenv('AWS_SECRET_ACCESS_KEY')
AWS_REGION = os.getenv('AWS_REGION', 'us-east-1')
S3_BUCKET_NAME = os.getenv('AWS_S3_BUCKET_NAME', '')


def get_s3_config_status() -> dict:
    """Report which S3 settings are present, without exposing their values."""
    return {
        "region": AWS_REGION,
        "bucket_name": S3_BUCKET_NAME,
        "has_access_key": bool(AWS_ACCESS_KEY_ID),
        "has_secret_key": bool(AWS_SECRET_ACCESS_KEY),
        "is_configured": bool(S3_BUCKET_NAME and AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY),
    }


def create_s3_client():
    """
    Build the S3 client used for certificate storage.

    Returns None when configuration is missing or the bucket cannot be
    reached; the blob store reports that as storage being unavailable.
    """
    missing_vars = []
    if not AWS_ACCESS_KEY_ID:
        missing_vars.append('AWS_ACCESS_KEY_ID')
    if not AWS_SECRET_ACCESS_KEY:
        missing_vars.append('AWS_SECRET_ACCESS_KEY')
    if not S3_BUCKET_NAME:
        missing_vars.append('AWS_S3_BUCKET_NAME')

    if missing_vars:
        logger.error(f"Missing required AWS S3 configuration: {', '.join(missing_vars)}")
        logger.error("Please set these environment variables in your .env file")
        return None

    try:
        s3_client = boto3.client(
            's3',
            aws_access_key_id=AWS_ACCESS_KEY_ID,
            aws_secret_access_key=AWS_SECRET_ACCESS_KEY,
            region_name=AWS_REGION,
            config=Config(signature_version='s3v4')
        )

        # Test the connection
        s3_client.head_bucket(Bucket=S3_BUCKET_NAME)
        logger.info(f"S3 client initialized successfully for bucket: {S3_BUCKET_NAME}")
        return s3_client

    except NoCredentialsError:
        logger.error("AWS credentials not found. Please check your environment variables.")
    except ClientError as e:
        error_code = e.response['Error']['Code']
        if error_code in ('NoSuchBucket', '404'):
            logger.error(f"S3 bucket '{S3_BUCKET_NAME}' does not exist in region '{AWS_REGION}'")
        elif error_code in ('AccessDenied', '403'):
            logger.error(f"Access denied to S3 bucket '{S3_BUCKET_NAME}'. Check IAM permissions.")
        else:
            logger.error(f"S3 client error: {str(e)}")
    except Exception as e:
        logger.error(f"Failed to initialize S3 client: {str(e)}")
    return None
