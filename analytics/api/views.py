import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from analytics.aggregation import build_analytics
from .serializers import DateRangeQuerySerializer

logger = logging.getLogger(__name__)


class AnalyticsAPIView(APIView):
    """
    GET /api/analytics/?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD

    Returns aggregates over the requests created in the inclusive range:
    - totalRevenue, totalOrders, averageOrderValue, confirmationRate
    - ordersByStatus, topServices, revenueByPeriod
    - addonsPerformance (from confirmed add-on rows)
    - dailyTrends (last 90 days of the range, zero-filled)

    Authentication: admin token
    """

    def get(self, request):
        query = DateRangeQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(
                {"error": "start_date and end_date are required (YYYY-MM-DD)", "details": query.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        start = query.validated_data["start_date"]
        end = query.validated_data["end_date"]
        try:
            data = build_analytics(start, end)
        except DatabaseError:
            logger.exception("Analytics query failed for %s..%s", start, end)
            return Response({"detail": "Internal Server Error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(data, status=status.HTTP_200_OK)
