from prodfind.models.bookmark import Bookmark
from prodfind.repositories.product_relation_repository import ProductRelationRepository


class BookmarkRepository(ProductRelationRepository):
    model = Bookmark
