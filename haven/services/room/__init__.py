from haven.services.room.room_occupancy_service import RoomOccupancyService, derive_status

__all__ = ["RoomOccupancyService", "derive_status"]
