"""Graph, circle, support network and score routes."""
import logging

from fastapi import APIRouter, Depends

from relmap.api.deps import (
    get_current_owner_id,
    get_insights_service,
    get_interaction_recorder,
)
from relmap.api.social.schemas import (
    CatalogResponse,
    CircleResponse,
    GraphLinkResponse,
    GraphNodeResponse,
    GraphSummaryResponse,
    PersonResponse,
    RelationshipGraphResponse,
    RelationshipTypeResponse,
    RoleCoverageResponse,
    SocialCirclesResponse,
    SocialScoreResponse,
    SupportGapResponse,
    SupportNetworkResponse,
    SupportRoleResponse,
    VisualizationResponse,
)
from relmap.domain.social.catalog import relationship_type_catalog, support_role_catalog
from relmap.domain.social.services import InteractionRecorder, SocialInsightsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/graph", response_model=RelationshipGraphResponse)
async def get_relationship_graph(
    owner_id: str = Depends(get_current_owner_id),
    service: SocialInsightsService = Depends(get_insights_service),
):
    """Star graph of the current user's relationships with a summary."""
    graph = await service.get_relationship_graph(owner_id)
    return RelationshipGraphResponse(
        user_id=graph.owner_id,
        relationships=[PersonResponse.from_entity(p) for p in graph.relationships],
        summary=GraphSummaryResponse(
            total_relationships=graph.summary.total_relationships,
            by_type={t.value: ids for t, ids in graph.summary.by_type.items()},
            average_health_score=graph.summary.average_health_score,
        ),
        visualization=VisualizationResponse(
            nodes=[
                GraphNodeResponse(
                    id=n.id,
                    name=n.name,
                    type=n.type,
                    health_score=n.health_score,
                    last_contact_at=n.last_contact_at,
                )
                for n in graph.nodes
            ],
            links=[
                GraphLinkResponse(source=link.source, target=link.target, type=link.type)
                for link in graph.links
            ],
        ),
    )


@router.get("/circles", response_model=SocialCirclesResponse)
async def get_social_circles(
    owner_id: str = Depends(get_current_owner_id),
    service: SocialInsightsService = Depends(get_insights_service),
):
    circles = await service.get_social_circles(owner_id)
    return SocialCirclesResponse(
        inner_circle=CircleResponse.from_circle(circles.inner),
        middle_circle=CircleResponse.from_circle(circles.middle),
        outer_circle=CircleResponse.from_circle(circles.outer),
    )


@router.get("/support-network", response_model=SupportNetworkResponse)
async def get_support_network(
    owner_id: str = Depends(get_current_owner_id),
    service: SocialInsightsService = Depends(get_insights_service),
):
    """Providers per support role plus the roles nobody covers."""
    network = await service.get_support_network(owner_id)
    return SupportNetworkResponse(
        user_id=owner_id,
        by_role={
            role.value: RoleCoverageResponse.from_coverage(coverage)
            for role, coverage in network.by_role.items()
        },
        gaps=[SupportGapResponse.from_gap(gap) for gap in network.gaps],
    )


@router.get("/score", response_model=SocialScoreResponse)
async def get_social_score(
    owner_id: str = Depends(get_current_owner_id),
    service: SocialInsightsService = Depends(get_insights_service),
):
    score = await service.get_social_score(owner_id)
    return SocialScoreResponse(user_id=owner_id, score=score)


@router.post("/health/refresh", response_model=list[PersonResponse])
async def refresh_health_scores(
    owner_id: str = Depends(get_current_owner_id),
    recorder: InteractionRecorder = Depends(get_interaction_recorder),
):
    """Re-apply time decay to every relationship of the current user."""
    persons = await recorder.refresh_health_scores(owner_id)
    logger.info(f"[SOCIAL] Health scores refreshed: owner={owner_id}, count={len(persons)}")
    return [PersonResponse.from_entity(p) for p in persons]


@router.get("/catalog", response_model=CatalogResponse)
async def get_catalog():
    """Relationship types and support roles with their display metadata."""
    return CatalogResponse(
        relationship_types=[
            RelationshipTypeResponse(id=info.type.value, name=info.label, emoji=info.emoji, color=info.color)
            for info in relationship_type_catalog()
        ],
        support_roles=[
            SupportRoleResponse(id=info.role.value, name=info.label, emoji=info.emoji, examples=list(info.examples))
            for info in support_role_catalog()
        ],
    )
