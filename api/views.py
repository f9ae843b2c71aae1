# api/views.py

from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView

from accounts.decorators import CustomTokenObtainPairSerializer, IsAdminRole
from organs.matching import HypotheticalDonor, override_match_rank, run_matching, update_match_status
from organs.models import DonorOrgan, Match
from .serializers import (
    DonorOrganSerializer,
    HypotheticalDonorSerializer,
    MatchOverrideSerializer,
    MatchRequestSerializer,
    MatchResultSerializer,
    MatchSerializer,
    MatchStatusSerializer,
)


@api_view(['POST'])
def match_donor(request):
    """
    Run the matching engine for one donor organ.

    Body: {donor_organ_id} or {donor_code} for a live run, or
    {simulation_mode: true, hypothetical_donor: {...}} for a what-if run.
    Simulation runs (including simulation_mode with a stored donor) write nothing.
    """
    serializer = MatchRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    hypothetical = data.get('hypothetical_donor')
    run = run_matching(
        request.user,
        donor_organ_id=data.get('donor_organ_id'),
        donor_code=data.get('donor_code'),
        simulation_mode=data['simulation_mode'],
        hypothetical_donor=HypotheticalDonor(**hypothetical) if hypothetical else None,
    )

    if run.donor.is_hypothetical:
        donor_data = HypotheticalDonorSerializer(run.donor).data
    else:
        donor_data = DonorOrganSerializer(run.donor).data

    return Response({
        'success': True,
        'simulation_mode': run.simulation_mode,
        'donor': donor_data,
        'matches': MatchResultSerializer(run.matches, many=True).data,
        'total_matches': run.total_matches,
        'matches_created': run.matches_created,
    }, status=status.HTTP_200_OK)


class DonorOrganViewSet(viewsets.ReadOnlyModelViewSet):
    """API endpoint for viewing donor organs"""
    queryset = DonorOrgan.objects.all().order_by('-created_at')
    serializer_class = DonorOrganSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        organ_type = self.request.query_params.get('organ_type')
        if organ_type and organ_type != 'all':
            queryset = queryset.filter(organ_type=organ_type)
        status_filter = self.request.query_params.get('status')
        if status_filter and status_filter != 'all':
            queryset = queryset.filter(status=status_filter)
        return queryset


class MatchViewSet(viewsets.ReadOnlyModelViewSet):
    """API endpoint for persisted matches, with admin re-ranking and status updates"""
    queryset = Match.objects.select_related('donor_organ').order_by('donor_organ', 'priority_rank')
    serializer_class = MatchSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        donor_organ = self.request.query_params.get('donor_organ')
        if donor_organ:
            if not donor_organ.isdigit():
                raise ValidationError({'donor_organ': 'Must be a donor organ id.'})
            queryset = queryset.filter(donor_organ_id=int(donor_organ))
        match_status = self.request.query_params.get('status')
        if match_status and match_status != 'all':
            queryset = queryset.filter(match_status=match_status)
        return queryset

    @action(detail=True, methods=['post'], permission_classes=[IsAdminRole])
    def override(self, request, pk=None):
        """Manually set the priority rank of a match, with a mandatory reason"""
        match = self.get_object()
        serializer = MatchOverrideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        override_match_rank(
            match,
            serializer.validated_data['priority_rank'],
            serializer.validated_data['override_reason'],
            request.user,
        )
        return Response(MatchSerializer(match).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'], url_path='status', permission_classes=[IsAdminRole])
    def update_status(self, request, pk=None):
        """Move a match to contacted, accepted or declined"""
        match = self.get_object()
        serializer = MatchStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            update_match_status(match, serializer.validated_data['match_status'], request.user)
        except ValueError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(MatchSerializer(match).data, status=status.HTTP_200_OK)


class TokenObtainView(TokenObtainPairView):
    """JWT pair carrying the user's role"""
    serializer_class = CustomTokenObtainPairSerializer
