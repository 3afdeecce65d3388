"""People and interaction routes."""
import logging

from fastapi import APIRouter, Depends, status

from relmap.api.deps import get_current_owner_id, get_interaction_recorder, get_relationship_store
from relmap.api.social.schemas import (
    AddPersonRequest,
    InteractionResponse,
    PersonDetailResponse,
    PersonResponse,
    RecordInteractionRequest,
    UpdatePersonRequest,
)
from relmap.domain.social.services import InteractionRecorder, RelationshipStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
async def add_person(
    request: AddPersonRequest,
    owner_id: str = Depends(get_current_owner_id),
    store: RelationshipStore = Depends(get_relationship_store),
):
    """Add a person to the current user's relationship map."""
    person = await store.add_person(
        owner_id=owner_id,
        name=request.name,
        relationship_type=request.relationship_type,
        support_roles=request.support_roles,
        notes=request.notes,
        contact_frequency_target=request.contact_frequency_target,
    )
    return PersonResponse.from_entity(person)


@router.get("", response_model=list[PersonResponse])
async def list_people(
    owner_id: str = Depends(get_current_owner_id),
    store: RelationshipStore = Depends(get_relationship_store),
):
    """List the current user's relationships in creation order."""
    persons = await store.get_relationships(owner_id)
    return [PersonResponse.from_entity(p) for p in persons]


@router.get("/{person_id}", response_model=PersonDetailResponse)
async def get_person(
    person_id: str,
    owner_id: str = Depends(get_current_owner_id),
    store: RelationshipStore = Depends(get_relationship_store),
):
    person = await store.get_person(owner_id, person_id)
    return PersonDetailResponse.from_entity(person)


@router.patch("/{person_id}", response_model=PersonResponse)
async def update_person(
    person_id: str,
    request: UpdatePersonRequest,
    owner_id: str = Depends(get_current_owner_id),
    store: RelationshipStore = Depends(get_relationship_store),
):
    """Update a person's name, notes, support roles or contact target."""
    person = await store.update_person(
        owner_id,
        person_id,
        name=request.name,
        notes=request.notes,
        support_roles=request.support_roles,
        contact_frequency_target=request.contact_frequency_target,
    )
    return PersonResponse.from_entity(person)


@router.post(
    "/{person_id}/interactions",
    response_model=InteractionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_interaction(
    person_id: str,
    request: RecordInteractionRequest,
    owner_id: str = Depends(get_current_owner_id),
    recorder: InteractionRecorder = Depends(get_interaction_recorder),
):
    """Record an interaction and recompute the person's health score."""
    interaction = await recorder.record_interaction(
        owner_id,
        person_id,
        type=request.type,
        duration_minutes=request.duration_minutes,
        quality_score=request.quality_score,
        notes=request.notes,
        topics=request.topics,
    )
    return InteractionResponse.from_entity(interaction)
