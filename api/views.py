"""
API views for the SimpleDB in-memory database.
"""
from datetime import datetime

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

import simpledb
from simpledb import CommandDispatcher
from simpledb.exceptions import CommandError, StoreError
from simpledb.logging import get_logger

from .store_manager import store_manager
from .serializers import (
    SetValueSerializer,
    CommandBatchSerializer,
    SnapshotSerializer,
)

logger = get_logger("api")

NO_TRANSACTION = 'NO TRANSACTION'


class BaseStoreView(APIView):
    """Base view with common functionality."""

    def get_store(self, name: str):
        """Get store instance for the name in the URL."""
        return store_manager.get_store(name)

    def no_transaction(self) -> Response:
        """Response for commit/rollback without an open transaction."""
        return Response({
            'error': 'NoTransaction',
            'message': NO_TRANSACTION
        }, status=status.HTTP_409_CONFLICT)

    def handle_store_error(self, error: Exception) -> Response:
        """Handle store-related errors."""
        if isinstance(error, CommandError):
            return Response({
                'error': type(error).__name__,
                'message': str(error),
                'line': error.line
            }, status=status.HTTP_400_BAD_REQUEST)

        elif isinstance(error, StoreError):
            return Response({
                'error': type(error).__name__,
                'message': str(error)
            }, status=status.HTTP_400_BAD_REQUEST)

        logger.error("unexpected_error", error=str(error))
        return Response({
            'error': 'InternalError',
            'message': str(error)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class HealthCheckView(APIView):
    """Health check endpoint."""

    def get(self, request) -> Response:
        """Get health status."""
        return Response({
            'status': 'healthy',
            'timestamp': datetime.now().isoformat(),
            'version': simpledb.__version__,
            'stores': len(store_manager.store_names())
        }, status=status.HTTP_200_OK)


class StoreListView(APIView):
    """List existing stores."""

    def get(self, request) -> Response:
        """Get the store names."""
        return Response({
            'stores': store_manager.store_names()
        }, status=status.HTTP_200_OK)


class StoreDetailView(BaseStoreView):
    """Create or drop a named store."""

    def put(self, request, name: str) -> Response:
        """Create the store if it does not exist yet."""
        self.get_store(name)
        return Response({
            'name': name,
            'status': 'ready'
        }, status=status.HTTP_201_CREATED)

    def delete(self, request, name: str) -> Response:
        """Drop the store and everything in it."""
        if not store_manager.close_store(name):
            return Response({
                'error': 'StoreNotFound',
                'message': f"Store '{name}' not found"
            }, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


class BeginTransactionView(BaseStoreView):
    """Begin a new transaction."""

    def post(self, request, name: str) -> Response:
        """Begin transaction."""
        depth = self.get_store(name).begin()
        return Response({
            'status': 'active',
            'depth': depth
        }, status=status.HTTP_201_CREATED)


class CommitTransactionView(BaseStoreView):
    """Commit all open transactions."""

    def post(self, request, name: str) -> Response:
        """Commit transactions."""
        if not self.get_store(name).commit():
            return self.no_transaction()
        return Response({
            'status': 'committed',
            'depth': 0
        }, status=status.HTTP_200_OK)


class RollbackTransactionView(BaseStoreView):
    """Rollback the innermost transaction."""

    def post(self, request, name: str) -> Response:
        """Rollback transaction."""
        store = self.get_store(name)
        if not store.rollback():
            return self.no_transaction()
        return Response({
            'status': 'rolled_back',
            'depth': store.transaction_depth
        }, status=status.HTTP_200_OK)


class TransactionStatusView(BaseStoreView):
    """Get transaction status."""

    def get(self, request, name: str) -> Response:
        """Get current transaction status."""
        depth = self.get_store(name).transaction_depth
        return Response({
            'has_active_transaction': depth > 0,
            'depth': depth,
            'status': 'active' if depth else 'none'
        }, status=status.HTTP_200_OK)


class KeyView(BaseStoreView):
    """Read, set and unset a single key."""

    def get(self, request, name: str, key: str) -> Response:
        """Get value for key; null when it has none."""
        return Response({
            'key': key,
            'value': self.get_store(name).get(key)
        }, status=status.HTTP_200_OK)

    def put(self, request, name: str, key: str) -> Response:
        """Set key-value pair."""
        data = {'key': key}
        if 'value' in request.data:
            data['value'] = request.data['value']
        serializer = SetValueSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        value = serializer.validated_data['value']
        self.get_store(name).set(key, value)
        return Response({
            'key': key,
            'value': value
        }, status=status.HTTP_200_OK)

    def delete(self, request, name: str, key: str) -> Response:
        """Unset key."""
        self.get_store(name).unset(key)
        return Response({
            'key': key,
            'value': None
        }, status=status.HTTP_200_OK)


class CountView(BaseStoreView):
    """Count keys holding a value."""

    def get(self, request, name: str, value: str) -> Response:
        """Get the number of keys equal to value."""
        return Response({
            'value': value,
            'count': self.get_store(name).num_equal_to(value)
        }, status=status.HTTP_200_OK)


class InspectView(BaseStoreView):
    """Snapshot of a store's internal structures."""

    def get(self, request, name: str) -> Response:
        """Get the snapshot."""
        snapshot = self.get_store(name).inspect()
        return Response(SnapshotSerializer(snapshot).data, status=status.HTTP_200_OK)


class CommandView(BaseStoreView):
    """Run protocol command lines against a store."""

    def post(self, request, name: str) -> Response:
        """Execute the commands in order and return their output."""
        serializer = CommandBatchSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        dispatcher = CommandDispatcher(self.get_store(name))
        output = []
        try:
            for line in serializer.validated_data['commands']:
                output.extend(dispatcher.run([line]))
                if dispatcher.finished:
                    break
        except StoreError as e:
            response = self.handle_store_error(e)
            response.data['output'] = output
            return response

        return Response({
            'output': output,
            'ended': dispatcher.finished
        }, status=status.HTTP_200_OK)
