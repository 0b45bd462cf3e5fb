"""
Base Schema Models for Claimable Vouchers

This module defines the base classes every voucher schema model inherits
from. It keeps serialization deterministic so that a voucher moved between
processes (e.g. as JSON to whatever submits the redeeming transaction)
parses back to exactly the same values.

Core Classes:
    - CanonicalModel: RFC8785-style Pydantic base model with canonical JSON output
    - VerificationStatus: Outcome codes for off-chain voucher verification
    - BaseVerificationResult: Abstract verification result model

Dependencies:
    - pydantic: For data validation and serialization
"""

import json
from typing import Optional, Dict, Any
from abc import ABC
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CanonicalModel(BaseModel):
    """
    RFC8785-style Pydantic base model with canonical JSON serialization.

    Features:
        - Automatic conversion of nested models and enums to standard types
        - Deterministic key sorting in JSON output
        - No extra whitespace, so equal models always serialize to equal strings

    Example:
        class MyModel(CanonicalModel):
            name: str
            value: int

        model = MyModel(name="test", value=123)
        canonical_json = model.to_canonical_json()  # '{"name":"test","value":123}'
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to a canonical JSON string.

        ``model_dump(mode="json", by_alias=True)`` converts nested objects and
        enums to plain types and emits wire names, then ``json.dumps`` sorts
        keys and strips whitespace.

        Returns:
            str: JSON string with sorted keys and no extra whitespace.
        """
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation using wire (alias) names.

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump(by_alias=True)


class VerificationStatus(str, Enum):
    """
    Enumeration of possible verification result statuses.

    Attributes:
        SUCCESS: Voucher signature is valid and every check passed
        INVALID_SIGNATURE: Signature is malformed or recovers to another address
        EXPIRED: Voucher expiry has passed
        REPLAY_ATTACK: Nonce has already been consumed
    """
    SUCCESS = "success"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    REPLAY_ATTACK = "replay_attack"


class BaseVerificationResult(CanonicalModel, ABC):
    """
    Abstract base class for signature verification results.

    Attributes:
        verification_type: Type of verification (e.g., "NFTVoucher")
        status: Verification result status (VerificationStatus enum)
        is_valid: Boolean indicating if verification was successful
        message: Human-readable status message
        error_details: Detailed error information if verification failed
        verified_at: Timestamp when verification was performed
    """

    verification_type: str = Field(..., description="Type of verification (e.g., NFTVoucher)")
    status: VerificationStatus = Field(..., description="Verification result status")
    is_valid: bool = Field(..., description="Whether the voucher is valid and verified")
    message: str = Field(..., description="Human-readable status message")
    error_details: Optional[Dict[str, Any]] = Field(None, description="Detailed error information")
    verified_at: datetime = Field(default_factory=datetime.now, description="Verification timestamp")

    def is_success(self) -> bool:
        """
        Check if verification was successful.

        Returns:
            bool: True if verification was successful, False otherwise.

        Example:
            result = verify_voucher(voucher, domain, expected_signer=issuer_address)
            if result.is_success():
                # Hand the voucher to the redeeming transaction
            else:
                # Reject before paying gas for a doomed claim
        """
        return self.is_valid and self.status == VerificationStatus.SUCCESS

    def get_error_message(self) -> Optional[str]:
        """
        Get formatted error message from verification result.

        Returns:
            Optional[str]: Error message if verification failed, None if successful.
        """
        if self.is_success():
            return None

        error_msg = f"Verification failed: {self.message}"
        if self.error_details:
            details_str = json.dumps(self.error_details, indent=2)
            error_msg += f"\nDetails: {details_str}"
        return error_msg
