from prodfind.models.recommendation import Recommendation
from prodfind.repositories.product_relation_repository import ProductRelationRepository


class RecommendationRepository(ProductRelationRepository):
    model = Recommendation
