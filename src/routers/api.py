from fastapi import APIRouter

from routers import datasource, robot, sensors, statistics, tasks

router = APIRouter()

# include sub-routers
router.include_router(robot.router)
router.include_router(sensors.router)
router.include_router(tasks.router)
router.include_router(statistics.router)
router.include_router(datasource.router)
