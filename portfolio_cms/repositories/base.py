class BaseRepository:
    """CRUD over one model through the shared scoped session."""

    model = None

    def __init__(self, session):
        self.session = session

    def query(self):
        return self.session.query(self.model)

    def get(self, entity_id):
        if entity_id is None:
            return None
        return self.session.get(self.model, entity_id)

    def list(self):
        return self.query().all()

    def count(self):
        return self.query().count()

    def add(self, entity):
        self.session.add(entity)
        return entity

    def delete(self, entity):
        self.session.delete(entity)

    def flush(self):
        self.session.flush()

    def paginate(self, query, page, page_size):
        total = query.order_by(None).count()
        items = query.offset((page - 1) * page_size).limit(page_size).all()
        return items, total
