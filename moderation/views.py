from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from rest_framework.response import Response
from rest_framework.views import APIView

from feedback.models import Feedback
from reports.models import CorrectionReport
from restaurants.models import Restaurant
from reviews.models import Review
from users.permissions import IsAdminRole


class AdminStatsView(APIView):
    """Counts for the admin dashboard"""

    permission_classes = [IsAdminRole]

    def get(self, request):
        restaurants = Restaurant.objects.aggregate(
            total=Count("id"),
            approved=Count("id", filter=Q(status=Restaurant.STATUS_APPROVED)),
            pending=Count("id", filter=Q(status=Restaurant.STATUS_PENDING)),
            rejected=Count("id", filter=Q(status=Restaurant.STATUS_REJECTED)),
        )
        reviews = Review.objects.aggregate(
            total=Count("id"),
            hidden=Count("id", filter=Q(is_hidden=True)),
        )
        reports = CorrectionReport.objects.aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status=CorrectionReport.STATUS_PENDING)),
        )
        feedback = Feedback.objects.aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status=Feedback.STATUS_PENDING)),
        )
        return Response(
            {
                "restaurants": restaurants,
                "reviews": reviews,
                "reports": reports,
                "feedback": feedback,
                "users": get_user_model().objects.count(),
            }
        )
