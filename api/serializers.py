"""
Serializers for API requests and responses.
"""
from rest_framework import serializers


def reject_whitespace(text: str, label: str) -> str:
    # keys and values travel through a whitespace-separated protocol
    if any(ch.isspace() for ch in text):
        raise serializers.ValidationError(f"{label} cannot contain whitespace.")
    return text


class SetValueSerializer(serializers.Serializer):
    """Serializer for set key operation."""
    key = serializers.CharField(max_length=1024, trim_whitespace=False)
    value = serializers.CharField(max_length=4096, trim_whitespace=False)

    def validate_key(self, key: str) -> str:
        return reject_whitespace(key, "Keys")

    def validate_value(self, value: str) -> str:
        return reject_whitespace(value, "Values")


class CommandBatchSerializer(serializers.Serializer):
    """Serializer for a batch of protocol command lines."""
    commands = serializers.ListField(
        # blank lines are skipped by the dispatcher
        child=serializers.CharField(trim_whitespace=False, allow_blank=True),
        allow_empty=False
    )


class SnapshotSerializer(serializers.Serializer):
    """Serializer for engine snapshots."""
    db = serializers.DictField(child=serializers.CharField())
    transactions = serializers.SerializerMethodField()
    transaction_indices_by_key = serializers.DictField(
        child=serializers.ListField(child=serializers.IntegerField())
    )
    current_values = serializers.DictField(child=serializers.CharField())
    value_counts = serializers.DictField(child=serializers.IntegerField())
    depth = serializers.IntegerField()

    def get_transactions(self, snapshot):
        # UNSET markers are rendered as null
        return [
            {key: value if isinstance(value, str) else None for key, value in frame.items()}
            for frame in snapshot.transactions
        ]
