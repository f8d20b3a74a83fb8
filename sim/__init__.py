"""
sim — Simulation core
=====================

Modules
-------
world
    :class:`ArenaWorld` vehicle table and fixed-order tick pipeline.
control_policy
    :class:`ControlPolicy` tunable constants and :class:`Arena` geometry.
vehicle
    :class:`Vehicle` / :class:`Sensor` entities.
steering
    :class:`SteeringController` containment, force and torque.
collision
    :class:`CollisionReactor` yield response to sensor contacts.
clearance
    :class:`ClearanceMonitor` return to the cruising profile.
perturbation
    :class:`PeriodicPerturbation` timed random jumps.
lifecycle
    :class:`LifecycleManager` spawn / despawn.
physics
    :class:`SimplePhysics` integrator and contact detector.
sim_bridge
    :class:`SimBridge` background-thread orchestrator.
geometry
    Low-level vector and quaternion helpers.
"""
